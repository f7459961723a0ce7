"""Tunable limits for buffering, input and sequence rendering.

Defaults match the classic compile-time knobs. An embedding application can
override them by passing its own :class:`SeqdConfig` to
:class:`seqd.terminal.Terminal`, or by exporting ``SEQD_<FIELD>`` variables
before calling :meth:`SeqdConfig.from_env`.
"""

from __future__ import annotations

import os
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = "SEQD_"


class SeqdConfig(BaseModel):
    """Immutable set of limits shared by all seqd components."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_line_iterations: int = Field(default=1024, gt=0)
    """Upper bound on chunks discarded while skipping a stale partial line."""

    max_fragment_size: int = Field(default=1024, gt=0)
    """Characters kept from a single staged fragment."""

    static_buffer_size: int = Field(default=32, gt=1)
    """Size of one rendering slot, including the reserved terminator."""

    static_buffer_count: int = Field(default=8, gt=0)
    """Number of rendering slots in the ring."""

    keyboard_timeout_ms: int = Field(default=100, ge=0)
    """Longest time :meth:`InputReader.poll_key` waits for a byte."""

    reply_timeout_ms: int = Field(default=1000, gt=0)
    """Longest time the size probe waits for the terminal's reply."""

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SeqdConfig:
        """Build a config from ``SEQD_*`` environment variables.

        Unset variables fall back to the defaults. Values are validated, so
        ``SEQD_KEYBOARD_TIMEOUT_MS=-1`` raises ``pydantic.ValidationError``.
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, str] = {}
        for name in cls.model_fields:
            value = env.get(ENV_PREFIX + name.upper())
            if value is not None:
                overrides[name] = value
        return cls.model_validate(overrides)
