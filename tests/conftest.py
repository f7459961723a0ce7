"""Shared fixtures: an in-memory platform backend and in-memory streams."""

from __future__ import annotations

import io
from collections import deque
from typing import Any

import pytest

from seqd.config import SeqdConfig
from seqd.errors import ModeError
from seqd.terminal import Terminal


class FakeBackend:
    """Records every call and keeps terminal settings as a plain dict.

    Satisfies the ``RawModeBackend`` protocol without touching a real
    terminal. ``settings`` is what the "terminal" currently has applied.
    """

    def __init__(self) -> None:
        self.settings: dict[str, Any] = {"echo": True, "icanon": True, "vmin": 4}
        self.calls: list[str] = []
        self.keys: deque[int] = deque()
        self.reply: bytes = b""
        self.fail_capture = False
        self.fail_apply = False
        self.fail_restore = False
        self.partial_apply = False
        self.wait_timeouts: list[int] = []
        self.reply_requests: list[tuple[int, int]] = []

    def capture(self) -> dict[str, Any]:
        self.calls.append("capture")
        if self.fail_capture:
            raise ModeError("capture failed")
        return dict(self.settings)

    def apply_raw(self, snapshot: dict[str, Any]) -> None:
        self.calls.append("apply_raw")
        if self.partial_apply:
            self.settings["echo"] = False
        if self.fail_apply:
            raise ModeError("apply failed")
        self.settings = {**snapshot, "echo": False, "icanon": False, "vmin": 1}

    def restore(self, snapshot: dict[str, Any]) -> None:
        self.calls.append("restore")
        if self.fail_restore:
            raise ModeError("restore failed")
        self.settings = dict(snapshot)

    def wait_byte(self, timeout_ms: int) -> int | None:
        self.calls.append("wait_byte")
        self.wait_timeouts.append(timeout_ms)
        if self.keys:
            return self.keys.popleft()
        return None

    def read_reply(self, size: int, timeout_ms: int) -> bytes:
        self.calls.append("read_reply")
        self.reply_requests.append((size, timeout_ms))
        return self.reply[:size]


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def stdout() -> io.BytesIO:
    return io.BytesIO()


@pytest.fixture
def stdin() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def terminal(
    backend: FakeBackend, stdin: io.StringIO, stdout: io.BytesIO
) -> Terminal:
    return Terminal(SeqdConfig(), stdin=stdin, stdout=stdout, backend=backend)
