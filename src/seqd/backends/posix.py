"""termios based backend for POSIX terminals."""

from __future__ import annotations

import logging
import os
import select
import termios
import tty

from seqd.errors import ModeError

logger = logging.getLogger(__name__)


def patch_lflag(attrs: int) -> int:
    """Clear canonical (line-buffered) input and echo."""
    return attrs & ~(termios.ICANON | termios.ECHO)


class PosixBackend:
    """Raw mode and key polling on a terminal file descriptor."""

    def __init__(self, fd: int) -> None:
        self.fd = fd

    def capture(self) -> list:
        try:
            return termios.tcgetattr(self.fd)
        except termios.error as err:
            raise ModeError(f"tcgetattr failed on fd {self.fd}: {err}") from err

    def apply_raw(self, snapshot: list) -> None:
        newattr = list(snapshot)
        newattr[tty.CC] = list(snapshot[tty.CC])
        newattr[tty.LFLAG] = patch_lflag(newattr[tty.LFLAG])

        # VMIN defaults to 4 on Solaris derived systems (it shares the slot
        # with VEOF), so set it explicitly.
        newattr[tty.CC][termios.VMIN] = 1
        newattr[tty.CC][termios.VTIME] = 0

        try:
            termios.tcsetattr(self.fd, termios.TCSANOW, newattr)
        except termios.error as err:
            raise ModeError(f"tcsetattr failed on fd {self.fd}: {err}") from err

    def restore(self, snapshot: list) -> None:
        try:
            termios.tcsetattr(self.fd, termios.TCSANOW, snapshot)
        except termios.error as err:
            raise ModeError(f"tcsetattr failed on fd {self.fd}: {err}") from err

    def wait_byte(self, timeout_ms: int) -> int | None:
        if not self._readable(timeout_ms):
            return None
        data = self._read(1)
        # b"" is end of input; a later poll may still see data.
        return data[0] if data else None

    def read_reply(self, size: int, timeout_ms: int) -> bytes:
        if not self._readable(timeout_ms):
            return b""
        return self._read(size)

    def _readable(self, timeout_ms: int) -> bool:
        poller = select.poll()
        poller.register(self.fd, select.POLLIN)
        return bool(poller.poll(timeout_ms))

    def _read(self, size: int) -> bytes:
        try:
            return os.read(self.fd, size)
        except OSError as err:
            # A pty whose other end hung up reports EIO instead of EOF.
            logger.debug("read on fd %d failed: %s", self.fd, err)
            return b""
