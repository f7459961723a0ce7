"""Console mode backend for Windows 10 and up."""

from __future__ import annotations

import ctypes
import msvcrt
import time
from ctypes import wintypes

from seqd.errors import ModeError

KERNEL32 = ctypes.WinDLL("kernel32", use_last_error=True)  # type: ignore

ENABLE_ECHO_INPUT = 0x0004
ENABLE_LINE_INPUT = 0x0002
ENABLE_VIRTUAL_TERMINAL_PROCESSING = 0x0004

# Interval between kbhit() checks while waiting for a key
_POLL_INTERVAL = 0.01


def get_console_mode(fd: int) -> int:
    """Get the console mode for a given file descriptor (stdin or stdout)."""
    handle = msvcrt.get_osfhandle(fd)  # type: ignore
    mode = wintypes.DWORD()
    if not KERNEL32.GetConsoleMode(handle, ctypes.byref(mode)):
        raise ModeError(ctypes.get_last_error(), f"GetConsoleMode failed on fd {fd}")
    return mode.value


def set_console_mode(fd: int, mode: int) -> None:
    """Set the console mode for a given file descriptor (stdin or stdout)."""
    handle = msvcrt.get_osfhandle(fd)  # type: ignore
    if not KERNEL32.SetConsoleMode(handle, mode):
        raise ModeError(ctypes.get_last_error(), f"SetConsoleMode failed on fd {fd}")


class WindowsBackend:
    """Raw mode via console flags, key polling via ``msvcrt``.

    The snapshot is the ``(input_mode, output_mode)`` pair. Raw mode clears
    line input and echo on the input handle and turns on VT processing for
    the output handle so escape sequences are interpreted.
    """

    def __init__(self, fd_in: int, fd_out: int) -> None:
        self.fd_in = fd_in
        self.fd_out = fd_out

    def capture(self) -> tuple[int, int]:
        return get_console_mode(self.fd_in), get_console_mode(self.fd_out)

    def apply_raw(self, snapshot: tuple[int, int]) -> None:
        mode_in, mode_out = snapshot
        set_console_mode(self.fd_in, mode_in & ~(ENABLE_LINE_INPUT | ENABLE_ECHO_INPUT))
        set_console_mode(self.fd_out, mode_out | ENABLE_VIRTUAL_TERMINAL_PROCESSING)

    def restore(self, snapshot: tuple[int, int]) -> None:
        mode_in, mode_out = snapshot
        set_console_mode(self.fd_in, mode_in)
        set_console_mode(self.fd_out, mode_out)

    def wait_byte(self, timeout_ms: int) -> int | None:
        if not self._wait_kbhit(timeout_ms):
            return None
        return msvcrt.getch()[0]

    def read_reply(self, size: int, timeout_ms: int) -> bytes:
        if not self._wait_kbhit(timeout_ms):
            return b""
        data = bytearray()
        while len(data) < size and msvcrt.kbhit():
            data += msvcrt.getch()
        return bytes(data)

    def _wait_kbhit(self, timeout_ms: int) -> bool:
        deadline = time.monotonic() + timeout_ms / 1000.0
        while not msvcrt.kbhit():
            if time.monotonic() >= deadline:
                return False
            time.sleep(_POLL_INTERVAL)
        return True
