"""Staged and immediate output of escape sequences.

Staged fragments accumulate in one growable buffer and go out in a single
``write`` on :meth:`OutputBuffer.flush`, so a full frame of cursor moves and
colors reaches the terminal at once. Immediate writes bypass the buffer and
are meant for protocol exchanges such as the cursor position query, where
the request must be visible to the terminal before the reply is read.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Iterable

from seqd.errors import AllocationError

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


class OutputBuffer:
    """Append-only command buffer in front of a binary output stream."""

    def __init__(self, stream: BinaryIO, *, max_fragment_size: int = 1024) -> None:
        self._stream = stream
        self._max_fragment_size = max_fragment_size
        self._buffer: bytearray | None = None

    # -- properties ---------------------------------------------------------

    @property
    def allocated(self) -> bool:
        return self._buffer is not None

    def __len__(self) -> int:
        return 0 if self._buffer is None else len(self._buffer)

    def getvalue(self) -> str:
        """Return the staged text without flushing it."""
        if self._buffer is None:
            return ""
        return self._buffer.decode(ENCODING)

    # -- staging ------------------------------------------------------------

    def stage(self, sequence: str) -> int:
        """Append *sequence* (cut to ``max_fragment_size`` characters).

        Returns the buffer length in bytes. If the buffer cannot grow it is
        dropped entirely and :class:`AllocationError` is raised.
        """
        data = sequence[: self._max_fragment_size].encode(ENCODING)
        try:
            buffer = self._buffer if self._buffer is not None else bytearray()
            self._grow(buffer, data)
        except MemoryError as err:
            self._buffer = None
            raise AllocationError(
                f"could not grow output buffer by {len(data)} bytes"
            ) from err
        self._buffer = buffer
        return len(buffer)

    def stage_all(self, *sequences: str | Iterable[str]) -> int:
        """Stage several sequences in order, stopping at the first failure.

        Accepts either separate arguments or a single iterable.
        """
        length = len(self)
        for sequence in _flatten(sequences):
            length = self.stage(sequence)
        return length

    def _grow(self, buffer: bytearray, data: bytes) -> None:
        buffer.extend(data)

    # -- delivery -----------------------------------------------------------

    def flush(self) -> None:
        """Write everything staged in one call and force it out.

        The staged content is kept, so flushing again repeats the frame.
        Call :meth:`clear` to start the next one.
        """
        if not self._buffer:
            return
        data = bytes(self._buffer)
        logger.debug("flushing %d staged bytes", len(data))
        self._stream.write(data)
        self._stream.flush()

    def clear(self) -> None:
        """Drop the staged content but keep the buffer allocated."""
        if self._buffer is not None:
            del self._buffer[:]

    def send_immediate(self, sequence: str) -> None:
        """Write *sequence* now, bypassing the staged buffer."""
        self._stream.write(sequence.encode(ENCODING))
        self._stream.flush()

    def send_all_immediate(self, *sequences: str | Iterable[str]) -> None:
        for sequence in _flatten(sequences):
            self.send_immediate(sequence)

    def release(self) -> None:
        """Free the staged buffer; the next :meth:`stage` allocates again."""
        self._buffer = None


def _flatten(sequences: tuple[str | Iterable[str], ...]) -> Iterable[str]:
    if len(sequences) == 1 and not isinstance(sequences[0], str):
        return sequences[0]
    return sequences  # type: ignore[return-value]
