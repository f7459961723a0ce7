"""Tests for seqd.output.OutputBuffer."""

from __future__ import annotations

import io

import pytest

from seqd.errors import AllocationError
from seqd.output import OutputBuffer


class RecordingStream(io.BytesIO):
    """BytesIO that counts write and flush calls."""

    def __init__(self) -> None:
        super().__init__()
        self.writes: list[bytes] = []
        self.flushes = 0

    def write(self, data: bytes) -> int:  # type: ignore[override]
        self.writes.append(bytes(data))
        return super().write(data)

    def flush(self) -> None:
        self.flushes += 1
        super().flush()


@pytest.fixture
def stream() -> RecordingStream:
    return RecordingStream()


# ---------------------------------------------------------------------------
# Staging
# ---------------------------------------------------------------------------


class TestStage:
    def test_buffer_starts_unallocated(self, stream: RecordingStream) -> None:
        buf = OutputBuffer(stream)
        assert not buf.allocated
        assert len(buf) == 0
        assert buf.getvalue() == ""

    def test_first_stage_allocates(self, stream: RecordingStream) -> None:
        buf = OutputBuffer(stream)
        assert buf.stage("\x1b[2J") == 4
        assert buf.allocated
        assert buf.getvalue() == "\x1b[2J"

    def test_stage_does_not_write(self, stream: RecordingStream) -> None:
        buf = OutputBuffer(stream)
        buf.stage("hello")
        assert stream.writes == []

    @pytest.mark.parametrize(
        "a, b",
        [
            ("", ""),
            ("\x1b[1;1H", "hello"),
            ("abc", ""),
            ("", "\x1b[0m"),
            ("世界", "\x1b[31mred"),
        ],
    )
    def test_append_is_concatenation(
        self, stream: RecordingStream, a: str, b: str
    ) -> None:
        buf = OutputBuffer(stream)
        buf.stage(a)
        buf.stage(b)
        buf.flush()
        assert stream.getvalue() == (a + b).encode("utf-8")

    def test_length_counts_encoded_bytes(self, stream: RecordingStream) -> None:
        buf = OutputBuffer(stream)
        assert buf.stage("世") == 3

    def test_long_fragment_is_cut_to_maximum(self, stream: RecordingStream) -> None:
        buf = OutputBuffer(stream, max_fragment_size=8)
        buf.stage("0123456789abcdef")
        assert buf.getvalue() == "01234567"

    def test_fragment_at_maximum_is_kept(self, stream: RecordingStream) -> None:
        buf = OutputBuffer(stream, max_fragment_size=4)
        buf.stage("abcd")
        assert buf.getvalue() == "abcd"

    def test_limit_applies_per_fragment(self, stream: RecordingStream) -> None:
        buf = OutputBuffer(stream, max_fragment_size=3)
        buf.stage("abcdef")
        buf.stage("ghijkl")
        assert buf.getvalue() == "abcghi"

    def test_malformed_sequences_pass_through(self, stream: RecordingStream) -> None:
        buf = OutputBuffer(stream)
        buf.stage("\x1b[[[zz")
        assert buf.getvalue() == "\x1b[[[zz"


class TestStageAll:
    def test_varargs_in_order(self, stream: RecordingStream) -> None:
        buf = OutputBuffer(stream)
        buf.stage_all("a", "b", "c")
        assert buf.getvalue() == "abc"

    def test_iterable(self, stream: RecordingStream) -> None:
        buf = OutputBuffer(stream)
        buf.stage_all(["x", "y"])
        assert buf.getvalue() == "xy"

    def test_single_string_is_one_fragment(self, stream: RecordingStream) -> None:
        buf = OutputBuffer(stream)
        buf.stage_all("abc")
        assert buf.getvalue() == "abc"

    def test_stops_at_first_failure(
        self, stream: RecordingStream, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        buf = OutputBuffer(stream)
        staged: list[bytes] = []
        original_grow = buf._grow

        def grow(buffer: bytearray, data: bytes) -> None:
            if data == b"boom":
                raise MemoryError
            staged.append(data)
            original_grow(buffer, data)

        monkeypatch.setattr(buf, "_grow", grow)
        with pytest.raises(AllocationError):
            buf.stage_all("one", "boom", "three")
        assert staged == [b"one"]


# ---------------------------------------------------------------------------
# Allocation failure
# ---------------------------------------------------------------------------


class TestAllocationFailure:
    def test_failed_growth_resets_buffer(
        self, stream: RecordingStream, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        buf = OutputBuffer(stream)
        buf.stage("already staged")

        def fail(buffer: bytearray, data: bytes) -> None:
            raise MemoryError

        monkeypatch.setattr(buf, "_grow", fail)
        with pytest.raises(AllocationError):
            buf.stage("more")

        assert len(buf) == 0
        assert not buf.allocated
        assert buf.getvalue() == ""

    def test_allocation_error_is_memory_error(
        self, stream: RecordingStream, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        buf = OutputBuffer(stream)

        def fail(buffer: bytearray, data: bytes) -> None:
            raise MemoryError

        monkeypatch.setattr(buf, "_grow", fail)
        with pytest.raises(MemoryError):
            buf.stage("x")

    def test_flush_after_failure_writes_nothing(
        self, stream: RecordingStream, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        buf = OutputBuffer(stream)
        buf.stage("half")

        def fail(buffer: bytearray, data: bytes) -> None:
            raise MemoryError

        monkeypatch.setattr(buf, "_grow", fail)
        with pytest.raises(AllocationError):
            buf.stage("written")
        buf.flush()
        assert stream.writes == []

    def test_buffer_usable_after_failure(
        self, stream: RecordingStream, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        buf = OutputBuffer(stream)

        def fail(buffer: bytearray, data: bytes) -> None:
            raise MemoryError

        monkeypatch.setattr(buf, "_grow", fail)
        with pytest.raises(AllocationError):
            buf.stage("lost")
        monkeypatch.undo()

        buf.stage("kept")
        assert buf.getvalue() == "kept"


# ---------------------------------------------------------------------------
# Flush and immediate writes
# ---------------------------------------------------------------------------


class TestFlush:
    def test_flush_is_a_single_write(self, stream: RecordingStream) -> None:
        buf = OutputBuffer(stream)
        buf.stage_all("\x1b[2J", "\x1b[1;1H", "hello")
        buf.flush()
        assert stream.writes == [b"\x1b[2J\x1b[1;1Hhello"]
        assert stream.flushes == 1

    def test_flush_unallocated_is_noop(self, stream: RecordingStream) -> None:
        OutputBuffer(stream).flush()
        assert stream.writes == []
        assert stream.flushes == 0

    def test_flush_empty_is_noop(self, stream: RecordingStream) -> None:
        buf = OutputBuffer(stream)
        buf.stage("")
        buf.flush()
        assert stream.writes == []

    def test_flush_keeps_staged_content(self, stream: RecordingStream) -> None:
        buf = OutputBuffer(stream)
        buf.stage("A")
        buf.flush()
        buf.flush()
        assert stream.getvalue() == b"AA"
        assert buf.getvalue() == "A"

    def test_staging_after_flush_appends(self, stream: RecordingStream) -> None:
        buf = OutputBuffer(stream)
        buf.stage("frame1")
        buf.flush()
        buf.stage("+more")
        buf.flush()
        assert stream.writes == [b"frame1", b"frame1+more"]

    def test_clear_starts_next_frame(self, stream: RecordingStream) -> None:
        buf = OutputBuffer(stream)
        buf.stage("frame1")
        buf.flush()
        buf.clear()
        assert buf.allocated
        assert len(buf) == 0
        buf.flush()
        buf.stage("frame2")
        buf.flush()
        assert stream.writes == [b"frame1", b"frame2"]

    def test_clear_unallocated_is_noop(self, stream: RecordingStream) -> None:
        buf = OutputBuffer(stream)
        buf.clear()
        assert not buf.allocated

    def test_release_frees_buffer(self, stream: RecordingStream) -> None:
        buf = OutputBuffer(stream)
        buf.stage("abc")
        buf.release()
        assert not buf.allocated
        buf.flush()
        assert stream.writes == []


class TestImmediate:
    def test_send_immediate_bypasses_buffer(self, stream: RecordingStream) -> None:
        buf = OutputBuffer(stream)
        buf.stage("staged")
        buf.send_immediate("\x1b[6n")
        assert stream.writes == [b"\x1b[6n"]
        assert stream.flushes == 1
        assert buf.getvalue() == "staged"

    def test_send_immediate_is_not_truncated(self, stream: RecordingStream) -> None:
        buf = OutputBuffer(stream, max_fragment_size=2)
        buf.send_immediate("abcdef")
        assert stream.getvalue() == b"abcdef"

    def test_send_all_immediate(self, stream: RecordingStream) -> None:
        buf = OutputBuffer(stream)
        buf.send_all_immediate("\x1b[999;999H", "\x1b[6n")
        assert stream.writes == [b"\x1b[999;999H", b"\x1b[6n"]
        assert stream.flushes == 2

    def test_send_all_immediate_iterable(self, stream: RecordingStream) -> None:
        buf = OutputBuffer(stream)
        buf.send_all_immediate(iter(["a", "b"]))
        assert stream.getvalue() == b"ab"
