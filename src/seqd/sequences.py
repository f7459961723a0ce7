"""ANSI escape sequence catalog.

Fixed sequences are plain string constants. Sequences that take arguments
are rendered by :class:`SequenceRenderer`, which writes each result into the
next slot of a small fixed-size ring. Python strings are immutable, so the
value handed back stays valid no matter how many renders follow.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Fixed sequences
# ---------------------------------------------------------------------------

ESC = "\x1b"
CSI = ESC + "["

RESET = CSI + "0m"

# Cursor
CURPOS = CSI + "6n"
HIDECUR = CSI + "?25l"
SHOWCUR = CSI + "?25h"

# Console
CLEAR = CSI + "2J"

# Text styles
BOLD = CSI + "1m"
FAINT = CSI + "2m"
ITALIC = CSI + "3m"
UNDERLINE = CSI + "4m"
BLINK_SLOW = CSI + "5m"
BLINK_FAST = CSI + "6m"
REVERSE = CSI + "7m"
CONCEAL = CSI + "8m"
CROSSED_OUT = CSI + "9m"

RESET_BOLD = CSI + "22m"
RESET_ITALIC = CSI + "23m"
RESET_UNDERLINE = CSI + "24m"
RESET_BLINK = CSI + "25m"
RESET_REVERSE = CSI + "27m"
RESET_CONCEAL = CSI + "28m"
RESET_CROSSED_OUT = CSI + "29m"

# Colors
FG_BLACK = CSI + "30m"
FG_RED = CSI + "31m"
FG_GREEN = CSI + "32m"
FG_YELLOW = CSI + "33m"
FG_BLUE = CSI + "34m"
FG_MAGENTA = CSI + "35m"
FG_CYAN = CSI + "36m"
FG_WHITE = CSI + "37m"

FG_BRIGHT_BLACK = CSI + "90m"
FG_BRIGHT_RED = CSI + "91m"
FG_BRIGHT_GREEN = CSI + "92m"
FG_BRIGHT_YELLOW = CSI + "93m"
FG_BRIGHT_BLUE = CSI + "94m"
FG_BRIGHT_MAGENTA = CSI + "95m"
FG_BRIGHT_CYAN = CSI + "96m"
FG_BRIGHT_WHITE = CSI + "97m"

BG_BLACK = CSI + "40m"
BG_RED = CSI + "41m"
BG_GREEN = CSI + "42m"
BG_YELLOW = CSI + "43m"
BG_BLUE = CSI + "44m"
BG_MAGENTA = CSI + "45m"
BG_CYAN = CSI + "46m"
BG_WHITE = CSI + "47m"

BG_BRIGHT_BLACK = CSI + "100m"
BG_BRIGHT_RED = CSI + "101m"
BG_BRIGHT_GREEN = CSI + "102m"
BG_BRIGHT_YELLOW = CSI + "103m"
BG_BRIGHT_BLUE = CSI + "104m"
BG_BRIGHT_MAGENTA = CSI + "105m"
BG_BRIGHT_CYAN = CSI + "106m"
BG_BRIGHT_WHITE = CSI + "107m"

# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------

KEY_ESC = 0x1B
KEY_BACKSPACE = 0x7F
KEY_TAB = ord("\t")
KEY_ENTER = ord("\n")
KEY_RETURN = KEY_ENTER

# Multi-byte keys arrive as several poll_key() results; callers compare
# the collected bytes against these.
KEY_UP = CSI + "A"
KEY_DOWN = CSI + "B"
KEY_RIGHT = CSI + "C"
KEY_LEFT = CSI + "D"

KEY_INSERT = CSI + "2~"
KEY_DELETE = CSI + "3~"
KEY_HOME = CSI + "H"
KEY_END = CSI + "F"
KEY_PAGE_UP = CSI + "5~"
KEY_PAGE_DOWN = CSI + "6~"


def ctrl_plus(key: str | int) -> int:
    """Byte produced by Ctrl + *key* in raw mode (letters only)."""
    return _code(key) & 0x1F


def shift_plus(key: str | int) -> int:
    """Byte produced by Shift + *key* in raw mode (flips letter case)."""
    return _code(key) ^ 0x20


def char_to_str(c: int) -> str:
    """Turn a byte from :meth:`InputReader.poll_key` into a one-char string."""
    return chr(c)


def _code(key: str | int) -> int:
    return ord(key) if isinstance(key, str) else key


# ---------------------------------------------------------------------------
# Parameterised sequences
# ---------------------------------------------------------------------------


class SequenceRenderer:
    """Renders parameterised sequences into a rotating ring of slots.

    Each slot holds at most ``slot_size - 1`` characters; longer renders are
    cut short, as a fixed terminated buffer would be.
    """

    def __init__(self, slot_count: int = 8, slot_size: int = 32) -> None:
        if slot_count < 1:
            raise ValueError("slot_count must be at least 1")
        if slot_size < 2:
            raise ValueError("slot_size must be at least 2")
        self._slot_size = slot_size
        self._slots: list[str] = [""] * slot_count
        self._index = 0

    @property
    def slots(self) -> tuple[str, ...]:
        return tuple(self._slots)

    @property
    def index(self) -> int:
        """Slot the next render will overwrite."""
        return self._index

    def render(self, fmt: str, *args: int) -> str:
        text = (fmt % args)[: self._slot_size - 1]
        self._slots[self._index] = text
        self._index = (self._index + 1) % len(self._slots)
        return text

    # -- cursor -------------------------------------------------------------

    def set_cursor(self, row: int, col: int) -> str:
        return self.render("\x1b[%d;%dH", row, col)

    def cursor_up(self, n: int) -> str:
        return self.render("\x1b[%dA", n)

    def cursor_down(self, n: int) -> str:
        return self.render("\x1b[%dB", n)

    def cursor_forward(self, n: int) -> str:
        return self.render("\x1b[%dC", n)

    def cursor_backward(self, n: int) -> str:
        return self.render("\x1b[%dD", n)

    def cursor_next_line(self, n: int) -> str:
        return self.render("\x1b[%dE", n)

    def cursor_prev_line(self, n: int) -> str:
        return self.render("\x1b[%dF", n)

    def cursor_horizontal(self, n: int) -> str:
        return self.render("\x1b[%dG", n)

    # -- console ------------------------------------------------------------

    def scroll_up(self, n: int) -> str:
        return self.render("\x1b[%dS", n)

    def scroll_down(self, n: int) -> str:
        return self.render("\x1b[%dT", n)

    def erase_display(self, n: int) -> str:
        return self.render("\x1b[%dJ", n)

    def erase_line(self, n: int) -> str:
        return self.render("\x1b[%dK", n)

    # -- colors -------------------------------------------------------------

    def fg_7(self, color: int) -> str:
        return self.render("\x1b[3%dm", color)

    def bg_7(self, color: int) -> str:
        return self.render("\x1b[4%dm", color)

    def fg_b7(self, color: int) -> str:
        return self.render("\x1b[9%dm", color)

    def bg_b7(self, color: int) -> str:
        return self.render("\x1b[10%dm", color)

    def fg_256(self, color: int) -> str:
        return self.render("\x1b[38;5;%dm", color)

    def bg_256(self, color: int) -> str:
        return self.render("\x1b[48;5;%dm", color)

    def fg_rgb(self, r: int, g: int, b: int) -> str:
        return self.render("\x1b[38;2;%d;%d;%dm", r, g, b)

    def bg_rgb(self, r: int, g: int, b: int) -> str:
        return self.render("\x1b[48;2;%d;%d;%dm", r, g, b)
