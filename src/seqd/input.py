"""Keyboard input: blocking line reads and non-blocking single keys."""

from __future__ import annotations

import logging
from typing import TextIO

from seqd.errors import AllocationError
from seqd.mode import ModeController

logger = logging.getLogger(__name__)


class InputReader:
    """Reads lines from a text stream and raw bytes through the mode backend.

    Parameters
    ----------
    stream:
        Text stream used by :meth:`read_line`, normally ``sys.stdin``.
    mode:
        Controller whose raw state gates :meth:`poll_key`.
    keyboard_timeout_ms:
        Longest wait in :meth:`poll_key`.
    max_line_iterations:
        Upper bound on reads spent discarding a stale partial line.
    """

    def __init__(
        self,
        stream: TextIO,
        mode: ModeController,
        *,
        keyboard_timeout_ms: int = 100,
        max_line_iterations: int = 1024,
    ) -> None:
        self._stream = stream
        self._mode = mode
        self._keyboard_timeout_ms = keyboard_timeout_ms
        self._max_line_iterations = max_line_iterations
        self._line: str | None = None

    @property
    def last_line(self) -> str | None:
        return self._line

    def read_line(self, max_length: int) -> str:
        """Block until a line arrives and return at most *max_length* chars.

        The trailing ``"\\n"`` is kept when it fits. If the previous call
        returned a partial line, the rest of that line is discarded first so
        it does not leak into this one.

        *max_length* counts decoded characters, not bytes: the stream is a
        text stream, so a multi-byte UTF-8 character never gets split.
        """
        if max_length < 1:
            raise ValueError(f"max_length must be positive, got {max_length}")

        self._discard_partial(max_length)
        try:
            line = self._stream.readline(max_length)
        except MemoryError as err:
            self._line = None
            raise AllocationError(
                f"could not allocate a {max_length} character line buffer"
            ) from err
        self._line = line
        return line

    def _discard_partial(self, chunk_size: int) -> None:
        if not self._line or self._line.endswith("\n"):
            return
        for _ in range(self._max_line_iterations):
            chunk = self._stream.readline(chunk_size)
            if not chunk or chunk.endswith("\n"):
                break
        else:
            logger.debug(
                "gave up discarding stale input after %d reads",
                self._max_line_iterations,
            )
        self._line = None

    def poll_key(self) -> int | None:
        """Return one pending byte, or ``None`` if nothing arrives in time.

        Outside raw mode this returns ``None`` right away without touching
        the input: canonical mode would block until a full line is typed.
        """
        if not self._mode.is_raw:
            return None
        return self._mode.backend.wait_byte(self._keyboard_timeout_ms)

    def release(self) -> None:
        self._line = None
