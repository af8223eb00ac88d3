"""Unit tests for NDJSON stream decoding."""

from collections.abc import AsyncIterator

from api_explainer.models.schemas import ModelEvent
from api_explainer.relay.ndjson import iter_batches, parse_event


async def chunked(*chunks: bytes) -> AsyncIterator[bytes]:
    for chunk in chunks:
        yield chunk


async def batches(*chunks: bytes) -> list[list[ModelEvent]]:
    return [batch async for batch in iter_batches(chunked(*chunks))]


async def collect(*chunks: bytes) -> list[ModelEvent]:
    return [event for batch in await batches(*chunks) for event in batch]


class TestParseEvent:
    """Tests for decoding a single complete line."""

    def test_decodes_fragment_and_done(self) -> None:
        """Known fields are read and extra backend fields are ignored."""
        event = parse_event(
            b'{"model":"llama3","created_at":"2024-01-01T00:00:00Z","response":"Hi","done":false}'
        )

        assert event == ModelEvent(response="Hi", done=False)

    def test_done_without_response(self) -> None:
        """Final events usually carry no fragment."""
        event = parse_event(b'{"done":true,"total_duration":123}')

        assert event is not None
        assert event.done is True
        assert event.response is None

    def test_malformed_lines_are_discarded(self) -> None:
        """Non-JSON, non-object and wrongly typed lines decode to None."""
        for line in (b"not-json", b'{"resp', b"[1, 2]", b'"text"', b'{"response": 5}', b"\xff\xfe"):
            assert parse_event(line) is None, line

    def test_blank_lines_are_skipped(self) -> None:
        """Whitespace-only lines are not treated as events."""
        assert parse_event(b"") is None
        assert parse_event(b"  \r") is None


class TestIterBatches:
    """Tests for line reassembly across reads."""

    async def test_one_event_per_line(self) -> None:
        """Each complete line yields one event in order."""
        events = await collect(b'{"response":"A"}\n{"response":"B"}\n{"done":true}\n')

        assert [e.response for e in events] == ["A", "B", None]
        assert events[-1].done is True

    async def test_line_split_across_reads(self) -> None:
        """A partial line is buffered until its newline arrives."""
        events = await collect(b'{"resp', b'onse":"A"}\n{"done":true}\n')

        assert [e.response for e in events] == ["A", None]

    async def test_many_small_reads(self) -> None:
        """Byte-at-a-time delivery still decodes every line."""
        data = b'{"response":"Hello"}\n{"response":" world"}\n'

        events = await collect(*(data[i : i + 1] for i in range(len(data))))

        assert "".join(e.response or "" for e in events) == "Hello world"

    async def test_multibyte_character_split_across_reads(self) -> None:
        """UTF-8 sequences split between reads are reassembled."""
        line = '{"response":"café ✓"}\n'.encode()
        cut = line.index("✓".encode()) + 1

        events = await collect(line[:cut], line[cut:])

        assert events[0].response == "café ✓"

    async def test_malformed_line_does_not_stop_stream(self) -> None:
        """Valid lines around a malformed one are still decoded."""
        events = await collect(b'{"response":"A"}\nnot-json\n{"response":"B"}\n{"done":true}\n')

        assert [e.response for e in events] == ["A", "B", None]

    async def test_incomplete_trailing_line_is_dropped(self) -> None:
        """Data after the last newline is never decoded."""
        events = await collect(b'{"response":"A"}\n{"response":"B"}')

        assert [e.response for e in events] == ["A"]

    async def test_empty_stream(self) -> None:
        """No input yields no events."""
        assert await collect() == []

    async def test_groups_events_by_read(self) -> None:
        """Each read yields the events whose lines it completed."""
        result = await batches(
            b'{"response":"A"}\n{"resp',
            b'onse":"B"}\n{"response":"C"}\n',
            b'{"done":true}\n',
        )

        assert [[e.response for e in batch] for batch in result] == [
            ["A"],
            ["B", "C"],
            [None],
        ]

    async def test_reads_without_complete_lines_yield_nothing(self) -> None:
        """Partial or noise-only reads produce no batch."""
        result = await batches(b'{"resp', b"onse", b'":"A"}\nnot-json\n', b"noise\n")

        assert [[e.response for e in batch] for batch in result] == [["A"]]
