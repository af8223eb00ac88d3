"""Pytest fixtures and shared test configuration.

Fixtures:
    - relay_config: Explicit relay settings independent of the environment
    - backend: Scripted Ollama backend recording every request
    - make_relay: Factory for relays wired to a scripted backend
    - async_client: HTTPX client for the API with the relay overridden
"""

from collections.abc import AsyncGenerator, Callable

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from api_explainer.api import app
from api_explainer.relay.config import RelayConfig
from api_explainer.relay.ollama_relay import OllamaRelay, get_relay
from tests.fakes import FakeOllama


@pytest.fixture
def relay_config() -> RelayConfig:
    """Return relay settings that do not depend on OLLAMA_* variables."""
    return RelayConfig(
        generate_url="http://ollama.test/api/generate",
        model="llama3",
        temperature=0.2,
        timeout=None,
        error_sentinel=False,
    )


@pytest.fixture
def backend() -> FakeOllama:
    """Return a scripted backend; tests fill in its chunks."""
    return FakeOllama()


@pytest.fixture
def make_relay(relay_config: RelayConfig) -> Callable[..., OllamaRelay]:
    """Build relays talking to a scripted backend.

    Keyword overrides are applied to the relay configuration.
    """

    def _make(handler: FakeOllama, **overrides) -> OllamaRelay:
        config = relay_config.model_copy(update=overrides)
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return OllamaRelay(config=config, client=client)

    return _make


@pytest.fixture
async def async_client(
    make_relay: Callable[..., OllamaRelay],
    backend: FakeOllama,
) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        AsyncClient bound to the app, whose relay talks to ``backend``.
    """
    relay = make_relay(backend)
    app.dependency_overrides[get_relay] = lambda: relay
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
    await relay.aclose()
