"""Terminal size probe via the cursor position report.

The cursor is sent far past the bottom right corner, which the terminal
clamps to the last row and column, and then the terminal is asked where the
cursor is. The reply ``CSI row ; col R`` gives the size.
"""

from __future__ import annotations

import logging
import re

from seqd.backends import RawModeBackend
from seqd.mode import ModeController
from seqd.output import OutputBuffer
from seqd.sequences import CURPOS

logger = logging.getLogger(__name__)

_FAR_CORNER = "\x1b[999;999H"
_REPLY_SIZE = 16
_CURSOR_REPORT_RE = re.compile(rb"\x1b\[(\d+);(\d+)R")


def parse_cursor_report(data: bytes) -> tuple[int, int] | None:
    """Parse ``ESC [ row ; col R`` at the start of *data* into ``(row, col)``.

    Bytes after the report are ignored.
    """
    match = _CURSOR_REPORT_RE.match(data)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


def query_terminal_size(
    mode: ModeController,
    output: OutputBuffer,
    backend: RawModeBackend,
    *,
    timeout_ms: int = 1000,
) -> tuple[int, int] | None:
    """Return ``(width, height)`` of the terminal, or ``None``.

    Only works in raw mode, where the reply is not line buffered; otherwise
    ``None`` is returned without writing anything. A missing or garbled reply
    also gives ``None``. Moves the cursor as a side effect.
    """
    if not mode.is_raw:
        return None

    output.send_all_immediate(_FAR_CORNER, CURPOS)
    reply = backend.read_reply(_REPLY_SIZE, timeout_ms)

    position = parse_cursor_report(reply)
    if position is None:
        logger.debug("unrecognised cursor position reply: %r", reply)
        return None
    row, col = position
    return col, row
