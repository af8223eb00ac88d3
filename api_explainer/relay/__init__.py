"""Ollama relay: prompt building and stream re-framing.

Responsibilities:
    - Prompt construction from the latest user message
    - Streaming requests to the local Ollama generate endpoint
    - Decoding Ollama's newline-delimited JSON events
    - Re-emitting generated text as a plain byte stream

Maintains clean separation from the HTTP layer.
"""

from api_explainer.relay.config import RelayConfig, get_relay_config
from api_explainer.relay.ollama_relay import (
    BackendError,
    OllamaRelay,
    RelayError,
    close_relay,
    get_relay,
)
from api_explainer.relay.prompt import build_prompt

__all__ = [
    "BackendError",
    "OllamaRelay",
    "RelayConfig",
    "RelayError",
    "build_prompt",
    "close_relay",
    "get_relay",
    "get_relay_config",
]
