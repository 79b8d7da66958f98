"""Repository -- persistence boundary for interactions."""

from .archive_repo import (
    ARCHIVE_SUFFIX,
    HttpArchiveRepository,
    append_to_archive_file,
    write_atomic,
)
from .base import InteractionRepository
from .locks import NamedLocks, archive_locks
from .logger_repo import TRACE_DIR_NAME, LoggerInteractionRepository, log_dir_from_handlers
from .naming import sanitize_file_name
from .null_repo import NullInteractionRepository
from .trace import format_message

__all__ = [
    "ARCHIVE_SUFFIX",
    "HttpArchiveRepository",
    "InteractionRepository",
    "LoggerInteractionRepository",
    "NamedLocks",
    "NullInteractionRepository",
    "TRACE_DIR_NAME",
    "append_to_archive_file",
    "archive_locks",
    "format_message",
    "log_dir_from_handlers",
    "sanitize_file_name",
    "write_atomic",
]
