"""Write-only repository that traces captured traffic next to the log files."""

import asyncio
import itertools
import logging
import threading
from pathlib import Path
from urllib.parse import urlsplit

from httprecorder.config import get_log_dir
from httprecorder.errors import PersistenceError, UnsupportedOperationError
from httprecorder.modules.anonymize import Anonymizer
from httprecorder.modules.interaction import Interaction

from .archive_repo import ARCHIVE_SUFFIX, append_to_archive_file, write_atomic
from .locks import NamedLocks, archive_locks
from .naming import sanitize_file_name
from .trace import format_message

module_logger = logging.getLogger(__name__)

TRACE_DIR_NAME = "trace"


def log_dir_from_handlers(logger: logging.Logger) -> Path | None:
    """Directory of the first file handler reachable from ``logger``."""
    current: logging.Logger | None = logger
    while current is not None:
        for handler in current.handlers:
            if isinstance(handler, logging.FileHandler):
                return Path(handler.baseFilename).parent
        if not current.propagate:
            break
        current = current.parent
    return None


class LoggerInteractionRepository:
    """Dumps each captured message as text plus a consolidated HAR file.

    Nothing is written unless ``logger`` is enabled for ``level``. The trace
    root is ``log_dir``, else the configured log directory, else the directory
    of the logger's file handler; without one, ``store`` is a no-op.
    ``store`` always returns ``None``: the trace is the only copy.
    """

    def __init__(
        self,
        logger: logging.Logger,
        log_dir: Path | str | None = None,
        level: int = logging.DEBUG,
        aggregate_name: str | None = None,
        anonymizer: Anonymizer | None = None,
        locks: NamedLocks | None = None,
    ):
        self.logger = logger
        self.log_dir = Path(log_dir) if log_dir is not None else None
        self.level = level
        self.aggregate_name = aggregate_name
        self.anonymizer = anonymizer
        self._locks = locks if locks is not None else archive_locks
        self._counter = itertools.count(1)
        self._counter_lock = threading.Lock()

    def resolve_log_dir(self) -> Path | None:
        return self.log_dir or get_log_dir() or log_dir_from_handlers(self.logger)

    def archive_path(self, root: Path, name: str) -> Path:
        if self.aggregate_name:
            file_name = sanitize_file_name(self.aggregate_name) + ARCHIVE_SUFFIX
            return root / TRACE_DIR_NAME / file_name
        safe_name = sanitize_file_name(name)
        return root / TRACE_DIR_NAME / safe_name / f"{safe_name}{ARCHIVE_SUFFIX}"

    async def exists(self, name: str) -> bool:
        return False

    async def load(self, name: str) -> Interaction:
        raise UnsupportedOperationError(
            f"Error while loading {name!r}: loading is not supported by the logger repository"
        )

    async def store(self, interaction: Interaction) -> Interaction | None:
        if not self.logger.isEnabledFor(self.level):
            return None
        if not interaction.messages:
            return None
        root = self.resolve_log_dir()
        if root is None:
            return None

        if self.anonymizer is not None:
            interaction = await self.anonymizer.anonymize(interaction)
        await asyncio.to_thread(self._write, root, interaction)

        for message in interaction.messages:
            self.logger.log(
                self.level,
                "%s %s -> %d (%.1f ms)",
                message.request.method,
                message.request.url,
                message.response.status_code,
                message.timings.elapsed * 1000,
            )
        return None

    def _next_id(self) -> int:
        with self._counter_lock:
            return next(self._counter)

    def _write(self, root: Path, interaction: Interaction) -> None:
        folder = root / TRACE_DIR_NAME / sanitize_file_name(interaction.name)
        thread_id = threading.get_ident()
        try:
            folder.mkdir(parents=True, exist_ok=True)
            for message in interaction.messages:
                host = urlsplit(message.request.url).hostname or "unknown"
                file_name = sanitize_file_name(
                    f"{thread_id}_{self._next_id()} {message.response.status_code} "
                    f"{message.request.method} {host}.txt"
                )
                write_atomic(folder / file_name, format_message(message))

            archive_path = self.archive_path(root, interaction.name)
            with self._locks.get(archive_path):
                append_to_archive_file(archive_path, interaction)
        except (OSError, TypeError, ValueError) as exc:
            raise PersistenceError(
                f"Error while writing trace for {interaction.name}: {exc}"
            ) from exc
        module_logger.debug("Traced %d message(s) under %s", len(interaction), folder)
