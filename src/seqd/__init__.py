"""seqd: escape-sequence display, raw keyboard input and terminal geometry."""

from seqd import sequences

# Configuration
from seqd.config import SeqdConfig

# Errors
from seqd.errors import AllocationError, ModeError, SeqdError

# Geometry
from seqd.geometry import parse_cursor_report, query_terminal_size

# Input
from seqd.input import InputReader

# Raw mode
from seqd.mode import ModeController

# Output buffering
from seqd.output import OutputBuffer

# Parameterised sequences
from seqd.sequences import SequenceRenderer

# Context object
from seqd.terminal import Terminal, get_terminal

__all__ = [
    "AllocationError",
    "InputReader",
    "ModeController",
    "ModeError",
    "OutputBuffer",
    "SeqdConfig",
    "SeqdError",
    "SequenceRenderer",
    "Terminal",
    "get_terminal",
    "parse_cursor_report",
    "query_terminal_size",
    "sequences",
]
