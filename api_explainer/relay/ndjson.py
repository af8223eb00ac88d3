"""Decoding of Ollama's newline-delimited JSON event stream.

Reads arrive in arbitrary chunks, so bytes are buffered until a full line is
available. Lines that do not decode to a ``ModelEvent`` are dropped. Events
are grouped by the read that completed them.
"""

import logging
from collections.abc import AsyncIterable, AsyncIterator

from pydantic import ValidationError

from api_explainer.models.schemas import ModelEvent

logger = logging.getLogger(__name__)


def parse_event(line: bytes) -> ModelEvent | None:
    """Decode one complete line.

    Args:
        line: A single line without its trailing newline.

    Returns:
        The decoded event, or None for blank or malformed lines.
    """
    if not line.strip():
        return None
    try:
        return ModelEvent.model_validate_json(line)
    except (ValidationError, UnicodeDecodeError):
        logger.debug(f"Discarding malformed stream line: {line[:200]!r}")
        return None


async def iter_batches(
    chunks: AsyncIterable[bytes],
) -> AsyncIterator[list[ModelEvent]]:
    """Yield the events completed by each read of a chunked NDJSON stream.

    Args:
        chunks: Raw byte chunks as read from the backend.

    Yields:
        One list per read holding the events whose lines that read
        completed, in stream order. Reads that complete no valid line
        yield nothing.
    """
    buffer = b""
    async for chunk in chunks:
        buffer += chunk
        *lines, buffer = buffer.split(b"\n")
        events = [event for event in map(parse_event, lines) if event is not None]
        if events:
            yield events

    if buffer.strip():
        logger.debug(f"Discarding incomplete trailing line: {buffer[:200]!r}")
