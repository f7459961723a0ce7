"""The terminal context object tying output, input and raw mode together.

All state lives on a :class:`Terminal` instance; there are no module-level
buffers or flags. Typical use::

    with Terminal() as term, term.raw():
        term.stage_all(sequences.CLEAR, term.render.set_cursor(1, 1), "hi")
        term.flush()
        key = term.poll_key()
"""

from __future__ import annotations

import atexit
import signal
import sys
import threading
from contextlib import contextmanager
from typing import Any, BinaryIO, Iterable, Iterator, TextIO

from seqd.backends import RawModeBackend, default_backend
from seqd.config import SeqdConfig
from seqd.geometry import query_terminal_size
from seqd.input import InputReader
from seqd.mode import ModeController
from seqd.output import OutputBuffer
from seqd.sequences import SequenceRenderer

# Signals that end the process by default and would leave raw mode behind
_EXIT_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
)


class Terminal:
    """Buffered escape-sequence output, keyboard input and raw mode.

    Parameters
    ----------
    config:
        Limits and timeouts; defaults to :class:`SeqdConfig` defaults.
    stdin:
        Text input stream, ``sys.stdin`` by default.
    stdout:
        Binary output stream, ``sys.stdout.buffer`` by default.
    backend:
        Platform backend; chosen from the running platform when omitted.
    """

    def __init__(
        self,
        config: SeqdConfig | None = None,
        *,
        stdin: TextIO | None = None,
        stdout: BinaryIO | None = None,
        backend: RawModeBackend | None = None,
    ) -> None:
        self.config = config or SeqdConfig()
        stdin = stdin or sys.stdin
        stdout = stdout or sys.stdout.buffer

        if backend is None:
            backend = default_backend(stdin.fileno(), stdout.fileno())
        self._backend = backend

        self.mode = ModeController(backend)
        self.output = OutputBuffer(
            stdout, max_fragment_size=self.config.max_fragment_size
        )
        self.input = InputReader(
            stdin,
            self.mode,
            keyboard_timeout_ms=self.config.keyboard_timeout_ms,
            max_line_iterations=self.config.max_line_iterations,
        )
        self.render = SequenceRenderer(
            self.config.static_buffer_count, self.config.static_buffer_size
        )
        self._exit_handler_installed = False
        self._prev_signal_handlers: dict[int, Any] = {}

    # -- output -------------------------------------------------------------

    def stage(self, sequence: str) -> int:
        return self.output.stage(sequence)

    def stage_all(self, *sequences: str | Iterable[str]) -> int:
        return self.output.stage_all(*sequences)

    def flush(self) -> None:
        self.output.flush()

    def clear(self) -> None:
        self.output.clear()

    def send_immediate(self, sequence: str) -> None:
        self.output.send_immediate(sequence)

    def send_all_immediate(self, *sequences: str | Iterable[str]) -> None:
        self.output.send_all_immediate(*sequences)

    # -- input --------------------------------------------------------------

    def read_line(self, max_length: int) -> str:
        return self.input.read_line(max_length)

    def poll_key(self) -> int | None:
        return self.input.poll_key()

    # -- raw mode -----------------------------------------------------------

    @property
    def is_raw(self) -> bool:
        return self.mode.is_raw

    def enter_raw(self) -> None:
        self.mode.enter_raw()

    def exit_raw(self) -> None:
        self.mode.exit_raw()

    @contextmanager
    def raw(self) -> Iterator[Terminal]:
        with self.mode.raw():
            yield self

    # -- geometry -----------------------------------------------------------

    def query_size(self) -> tuple[int, int] | None:
        """Return ``(width, height)`` in raw mode, ``None`` otherwise."""
        return query_terminal_size(
            self.mode,
            self.output,
            self._backend,
            timeout_ms=self.config.reply_timeout_ms,
        )

    # -- lifecycle ----------------------------------------------------------

    def close(self) -> None:
        """Leave raw mode if needed and release both buffers."""
        try:
            self.mode.exit_raw()
        finally:
            self.output.release()
            self.input.release()
        if self._exit_handler_installed:
            atexit.unregister(self.close)
            self._restore_signal_handlers()
            self._exit_handler_installed = False

    def install_exit_handler(self) -> None:
        """Register :meth:`close` to run at interpreter exit.

        A safety net for code paths that never reach :meth:`close`, so the
        terminal is not left in raw mode when the program exits. Called from
        the main thread it also closes the terminal on SIGTERM and SIGHUP
        before handing the signal to whatever handler was there before.
        """
        if self._exit_handler_installed:
            return
        atexit.register(self.close)
        if threading.current_thread() is threading.main_thread():
            for signum in _EXIT_SIGNALS:
                previous = signal.getsignal(signum)
                if previous is signal.SIG_IGN:
                    continue
                self._prev_signal_handlers[signum] = previous
                signal.signal(signum, self._on_exit_signal)
        self._exit_handler_installed = True

    def _restore_signal_handlers(self) -> None:
        for signum, previous in self._prev_signal_handlers.items():
            # None means the handler was not installed from Python
            signal.signal(signum, signal.SIG_DFL if previous is None else previous)
        self._prev_signal_handlers.clear()

    def _on_exit_signal(self, signum: int, frame: object) -> None:
        previous = self._prev_signal_handlers.get(signum, signal.SIG_DFL)
        self._restore_signal_handlers()
        try:
            self.close()
        finally:
            if callable(previous):
                previous(signum, frame)
            else:
                signal.raise_signal(signum)

    def __enter__(self) -> Terminal:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


_default_terminal: Terminal | None = None


def get_terminal() -> Terminal:
    """Return the process-wide default :class:`Terminal`, creating it once.

    The config is read from ``SEQD_*`` environment variables on first use.
    """
    global _default_terminal
    if _default_terminal is None:
        _default_terminal = Terminal(SeqdConfig.from_env())
        _default_terminal.install_exit_handler()
    return _default_terminal
