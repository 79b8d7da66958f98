"""Execution modes and recorder configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from httprecorder.config import MODE_ENV_VAR, get_archive_dir, get_mode_override

logger = logging.getLogger(__name__)


class ExecutionMode(Enum):
    """How intercepted calls are handled."""

    PASSTHROUGH = "Passthrough"
    RECORD = "Record"
    REPLAY = "Replay"
    AUTO = "Auto"

    @classmethod
    def parse(cls, value: str | None) -> ExecutionMode | None:
        """Exact, case-sensitive lookup by value; None for anything else."""
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class RecorderConfig:
    """Every recorder option with its default.

    Attributes:
        interaction_name: Archive key; relative file name for the HAR repository.
        mode: Requested mode. ``AUTO`` replays when the archive exists.
        enabled: When False nothing is persisted (null repository).
        archive_dir: Root for HAR files; defaults to the configured archive dir.
        override_env_var: Setting that forces a mode for the whole process.
        fast_append: Use the splice append path when adding to an archive.
        anonymize_live_requests: Redact live requests before replay matching.
    """

    interaction_name: str = "default"
    mode: ExecutionMode = ExecutionMode.AUTO
    enabled: bool = True
    archive_dir: Path = field(default_factory=get_archive_dir)
    override_env_var: str = MODE_ENV_VAR
    fast_append: bool = True
    anonymize_live_requests: bool = True


def read_mode_override(key: str = MODE_ENV_VAR) -> ExecutionMode | None:
    """Process-wide override, or None when unset or not a valid mode."""
    raw = get_mode_override(key)
    if raw is None:
        return None
    mode = ExecutionMode.parse(raw)
    if mode is None:
        logger.warning("Ignoring %s=%r: not one of %s", key, raw, [m.value for m in ExecutionMode])
    return mode
