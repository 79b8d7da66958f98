"""Recording engine -- mode resolution, interception and recording contexts."""

from .context import (
    ContextTransport,
    RecorderSessions,
    RecordingContext,
    activate,
    default_sessions,
)
from .factory import create_logging_transport
from .modes import ExecutionMode, RecorderConfig, read_mode_override
from .transport import RecorderTransport, default_repository

__all__ = [
    "ContextTransport",
    "ExecutionMode",
    "RecorderConfig",
    "RecorderSessions",
    "RecorderTransport",
    "RecordingContext",
    "activate",
    "create_logging_transport",
    "default_repository",
    "default_sessions",
    "read_mode_override",
]
