"""HAR file repository -- one archive file per interaction."""

import asyncio
import logging
import os
import tempfile
from pathlib import Path

from httprecorder.config import get_archive_dir
from httprecorder.errors import NoSuchInteractionError, PersistenceError
from httprecorder.modules.anonymize import Anonymizer
from httprecorder.modules.archive import (
    HarCreator,
    append_entries,
    append_entries_slow,
    archive_to_interaction,
    dumps_archive,
    interaction_to_archive,
    loads_archive,
)
from httprecorder.modules.interaction import Interaction

from .locks import NamedLocks, archive_locks
from .naming import sanitize_file_name

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".har"


def write_atomic(path: Path, text: str) -> None:
    """Replace ``path`` with ``text`` so readers only ever see a complete file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def append_to_archive_file(
    path: Path,
    interaction: Interaction,
    creator: HarCreator | None = None,
    fast_append: bool = True,
) -> bool:
    """Write ``interaction`` as a new archive or append its entries to ``path``.

    The caller must hold the archive lock. Returns True when a new file was
    created.
    """
    archive = interaction_to_archive(interaction, creator)
    if not path.is_file():
        write_atomic(path, dumps_archive(archive))
        return True

    existing = path.read_text(encoding="utf-8")
    if fast_append:
        updated = append_entries(existing, archive.entries)
    else:
        updated = append_entries_slow(existing, archive.entries)
    write_atomic(path, updated)
    return False


class HttpArchiveRepository:
    """Stores each interaction as a HAR file under ``root_dir``.

    The file is ``root_dir / <sanitized name>``, with ``.har`` appended when
    the name carries no suffix. Stores to the same file serialize on a named
    lock and run in a worker thread.
    """

    def __init__(
        self,
        root_dir: Path | str | None = None,
        anonymizer: Anonymizer | None = None,
        fast_append: bool = True,
        creator: HarCreator | None = None,
        locks: NamedLocks | None = None,
    ):
        self.root_dir = Path(root_dir) if root_dir is not None else get_archive_dir()
        self.anonymizer = anonymizer
        self.fast_append = fast_append
        self.creator = creator
        self._locks = locks if locks is not None else archive_locks

    def path_for(self, name: str) -> Path:
        file_name = sanitize_file_name(name)
        if not Path(file_name).suffix:
            file_name += ARCHIVE_SUFFIX
        return self.root_dir / file_name

    async def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    async def load(self, name: str) -> Interaction:
        path = self.path_for(name)
        if not path.is_file():
            raise NoSuchInteractionError(name)
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Error while reading file {path}: {exc}") from exc

        archive = loads_archive(text)
        interaction = archive_to_interaction(name, archive)
        logger.debug("Loaded %d message(s) from %s", len(interaction), path)
        return interaction

    async def store(self, interaction: Interaction) -> Interaction | None:
        if not interaction.messages:
            return None
        if self.anonymizer is not None:
            interaction = await self.anonymizer.anonymize(interaction)

        path = self.path_for(interaction.name)
        created = await asyncio.to_thread(self._store_locked, path, interaction)
        if created:
            logger.info("Created archive %s", path)
        else:
            logger.debug("Appended %d message(s) to %s", len(interaction), path)
        return interaction

    def _store_locked(self, path: Path, interaction: Interaction) -> bool:
        with self._locks.get(path):
            try:
                return append_to_archive_file(path, interaction, self.creator, self.fast_append)
            except (OSError, TypeError, ValueError) as exc:
                raise PersistenceError(f"Error while writing file {path}: {exc}") from exc
