"""Scripted stand-ins for the Ollama backend."""

import json
from typing import Any

import httpx


class ScriptedStream(httpx.AsyncByteStream):
    """Response body that yields fixed chunks, then optionally fails.

    Records whether the consumer closed it.
    """

    def __init__(self, chunks: list[bytes], error: Exception | None = None) -> None:
        self.chunks = chunks
        self.error = error
        self.closed = False

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk
        if self.error is not None:
            raise self.error

    async def aclose(self) -> None:
        self.closed = True


class FakeOllama:
    """MockTransport handler imitating POST /api/generate."""

    def __init__(
        self,
        chunks: bytes | list[bytes] | None = None,
        status_code: int = 200,
        error: Exception | None = None,
        connect_error: bool = False,
        send_error: Exception | None = None,
    ) -> None:
        self.chunks = chunks or []
        self.status_code = status_code
        self.error = error
        self.connect_error = connect_error
        self.send_error = send_error
        self.requests: list[httpx.Request] = []
        self.streams: list[ScriptedStream] = []

    @property
    def payloads(self) -> list[dict[str, Any]]:
        return [json.loads(request.content) for request in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.connect_error:
            raise httpx.ConnectError("Connection refused", request=request)
        if self.send_error is not None:
            raise self.send_error
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": "model 'nope' not found"})

        # a bare bytes value is one read
        chunks = [self.chunks] if isinstance(self.chunks, bytes) else list(self.chunks)
        stream = ScriptedStream(chunks, self.error)
        self.streams.append(stream)
        return httpx.Response(
            200,
            stream=stream,
            headers={"Content-Type": "application/x-ndjson"},
        )


def ndjson(*events: dict[str, Any]) -> bytes:
    """Encode events as newline-terminated JSON lines."""
    return b"".join(json.dumps(event).encode() + b"\n" for event in events)
