"""Platform backends for raw mode and unbuffered key input.

There are exactly two implementations, one for POSIX terminals (termios) and
one for the Windows console (console mode flags). :func:`default_backend`
picks the one matching the running platform; nothing else in seqd looks at
the platform.
"""

from __future__ import annotations

import os
from typing import Any, Protocol

_IS_WINDOWS = os.name == "nt"


class RawModeBackend(Protocol):
    """Interface every platform backend implements.

    ``capture`` returns an opaque snapshot that ``restore`` accepts
    unchanged. All OS failures surface as :class:`seqd.errors.ModeError`.
    """

    def capture(self) -> Any: ...

    def apply_raw(self, snapshot: Any) -> None: ...

    def restore(self, snapshot: Any) -> None: ...

    def wait_byte(self, timeout_ms: int) -> int | None: ...

    def read_reply(self, size: int, timeout_ms: int) -> bytes: ...


def default_backend(fd_in: int, fd_out: int) -> RawModeBackend:
    """Return the backend for the current platform."""
    if _IS_WINDOWS:
        from seqd.backends.windows import WindowsBackend

        return WindowsBackend(fd_in, fd_out)
    from seqd.backends.posix import PosixBackend

    return PosixBackend(fd_in)
