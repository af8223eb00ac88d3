"""Ollama stream relay.

Turns one prompt into a streaming call to Ollama's generate endpoint and
re-emits the generated text as a flat byte stream.

Failures are split at the point where the HTTP response to the caller is
committed:

1. **Before streaming** - connection errors and any non-2xx status raise
   ``BackendError`` from ``open_stream`` so the endpoint can still answer
   with a 500 and a JSON body.
2. **After streaming started** - the status line is already sent, so errors
   are logged and the stream simply ends. With ``error_sentinel`` enabled an
   ``[Error: ...]`` marker is appended first.

The backend response is closed on every exit path, including the caller
disconnecting, which cancels the generator and aborts the backend request.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import aclosing

import httpx

from api_explainer.models.schemas import GenerateOptions, GenerateRequest
from api_explainer.relay.config import RelayConfig, get_relay_config
from api_explainer.relay.ndjson import iter_batches

logger = logging.getLogger(__name__)


class RelayError(Exception):
    """Base class for relay failures."""


class BackendError(RelayError):
    """Raised when the backend cannot be reached or rejects the request."""


class OllamaRelay:
    """Relays prompts to Ollama and streams back the generated text."""

    def __init__(
        self,
        config: RelayConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the relay.

        Args:
            config: Optional relay configuration.
                    Loads from environment if not provided.
            client: Optional HTTP client, mainly for tests.
        """
        self._config = config or get_relay_config()
        self._client = client or httpx.AsyncClient(timeout=self._config.timeout)

    @property
    def config(self) -> RelayConfig:
        return self._config

    def build_request(
        self,
        prompt: str,
        model: str | None = None,
        temperature: float | None = None,
    ) -> GenerateRequest:
        return GenerateRequest(
            model=model if model is not None else self._config.model,
            prompt=prompt,
            options=GenerateOptions(
                temperature=(
                    temperature if temperature is not None else self._config.temperature
                ),
            ),
        )

    async def open_stream(
        self,
        prompt: str,
        *,
        model: str | None = None,
        temperature: float | None = None,
    ) -> AsyncIterator[bytes]:
        """Start generation and return the relayed byte stream.

        Args:
            prompt: Prompt text for the model.
            model: Model override (config default if None).
            temperature: Temperature override (config default if None).

        Returns:
            Async iterator of UTF-8 encoded response fragments.

        Raises:
            BackendError: If the backend is unreachable or returns an error
                status. Nothing has been streamed at that point.
        """
        payload = self.build_request(prompt, model, temperature)
        request = self._client.build_request(
            "POST",
            self._config.generate_url,
            json=payload.model_dump(),
        )

        logger.info(f"Relaying prompt ({len(prompt)} chars) to model {payload.model}")

        try:
            response = await self._client.send(request, stream=True)
        except httpx.HTTPError as e:
            logger.error(f"Ollama request failed: {e}")
            raise BackendError(f"Ollama unreachable: {e}") from e

        if not response.is_success:
            await response.aclose()
            logger.error(f"Ollama returned {response.status_code}")
            raise BackendError(
                f"Ollama error: {response.status_code} {response.reason_phrase}"
            )

        return self._relay(response)

    async def _relay(self, response: httpx.Response) -> AsyncIterator[bytes]:
        """Forward fragments from an open backend response until it ends.

        A ``done`` event drops the remaining lines of the read that carried
        it. The stream itself only ends with the backend data.
        """
        fragments = 0
        try:
            async with aclosing(iter_batches(response.aiter_bytes())) as batches:
                async for batch in batches:
                    for event in batch:
                        if event.response:
                            fragments += 1
                            yield event.response.encode("utf-8")
                        if event.done:
                            break
        except Exception as e:
            # Headers are already committed; the caller only sees the stream end.
            logger.warning(f"Relay stream aborted after {fragments} fragments: {e}")
            if self._config.error_sentinel:
                yield f"\n\n[Error: {e}]".encode()
        finally:
            await response.aclose()
            logger.debug(f"Relay stream closed after {fragments} fragments")

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()


# Module-level singleton instance
_relay: OllamaRelay | None = None


def get_relay() -> OllamaRelay:
    """Get or create the global relay.

    Shares one connection pool across requests.

    Returns:
        The OllamaRelay instance.
    """
    global _relay
    if _relay is None:
        _relay = OllamaRelay()
    return _relay


async def close_relay() -> None:
    """Close and drop the global relay, if one was created."""
    global _relay
    if _relay is not None:
        await _relay.aclose()
        _relay = None
