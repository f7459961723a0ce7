"""Raw mode state and transitions.

:class:`ModeController` owns the ``is_raw`` flag and the snapshot of the
settings that were active before raw mode was entered. The snapshot is taken
once per entry and handed back to the backend once per exit, so leaving raw
mode always restores echo and line editing exactly as they were.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from seqd.backends import RawModeBackend
from seqd.errors import ModeError

logger = logging.getLogger(__name__)


class ModeController:
    def __init__(self, backend: RawModeBackend) -> None:
        self._backend = backend
        self._is_raw = False
        self._snapshot: Any = None

    @property
    def is_raw(self) -> bool:
        return self._is_raw

    @property
    def backend(self) -> RawModeBackend:
        return self._backend

    def enter_raw(self) -> None:
        """Disable line buffering and echo.

        Does nothing when raw mode is already active, so the original
        settings captured by the first call are the ones restored later.
        Raises :class:`ModeError` if the settings cannot be read or applied.
        """
        if self._is_raw:
            logger.debug("enter_raw: already raw")
            return

        snapshot = self._backend.capture()
        try:
            self._backend.apply_raw(snapshot)
        except ModeError:
            # Part of the new settings may already be in effect.
            try:
                self._backend.restore(snapshot)
            except ModeError as err:
                logger.warning("could not restore terminal after failed apply: %s", err)
            raise

        self._snapshot = snapshot
        self._is_raw = True
        logger.debug("entered raw mode")

    def exit_raw(self) -> None:
        """Restore the settings captured by :meth:`enter_raw`.

        Does nothing when not raw. If the restore fails, the controller stays
        raw with its snapshot intact so the call can be retried.
        """
        if not self._is_raw:
            return

        self._backend.restore(self._snapshot)
        self._snapshot = None
        self._is_raw = False
        logger.debug("left raw mode")

    @contextmanager
    def raw(self) -> Iterator[ModeController]:
        """Hold raw mode for the duration of a ``with`` block.

        A block opened while raw mode is already active leaves it active on
        exit; only the block that switched raw mode on switches it off.
        """
        entered = not self._is_raw
        self.enter_raw()
        try:
            yield self
        finally:
            if entered:
                self.exit_raw()
