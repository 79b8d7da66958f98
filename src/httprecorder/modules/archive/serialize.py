"""JSON (de)serialization of archives, including the splice append fast path."""

import json
import logging

from httprecorder.errors import MalformedArchiveError

from .har import HarEntry, HttpArchive

logger = logging.getLogger(__name__)

INDENT = 2
_ENTRIES_MARKER = '"entries": [\n'
# closing of entries list, log object and document at INDENT=2
_CLOSING = "\n" + " " * (2 * INDENT) + "]\n" + " " * INDENT + "}\n}"
_OPENING = "{\n" + " " * INDENT + '"log": {\n'


def dumps_archive(archive: HttpArchive) -> str:
    """Serialize an archive to indented HAR JSON."""
    return json.dumps(archive.to_dict(), indent=INDENT, ensure_ascii=False)


def loads_archive(text: str) -> HttpArchive:
    """Parse HAR JSON, raising :class:`MalformedArchiveError` on any defect."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedArchiveError(f"Archive is not valid JSON: {exc}") from exc
    return HttpArchive.from_dict(data)


def append_entries_slow(existing_text: str, entries: list[HarEntry]) -> str:
    """Parse, append and reserialize. Always correct."""
    archive = loads_archive(existing_text)
    archive.log.entries.extend(entries)
    return dumps_archive(archive)


def _entries_block(entries: list[HarEntry]) -> str:
    """Serialized entries exactly as they appear inside the ``entries`` list."""
    archive = HttpArchive()
    archive.log.entries.extend(entries)
    text = dumps_archive(archive)
    start = text.index(_ENTRIES_MARKER) + len(_ENTRIES_MARKER)
    return text[start : len(text) - len(_CLOSING)]


def can_splice(existing_text: str) -> bool:
    """True when ``existing_text`` has the exact layout :func:`dumps_archive` writes
    and already holds at least one entry."""
    if not existing_text.startswith(_OPENING) or not existing_text.endswith(_CLOSING):
        return False
    head = existing_text[: len(existing_text) - len(_CLOSING)]
    return head.endswith(" " * (3 * INDENT) + "}") and _ENTRIES_MARKER in head


def append_entries(existing_text: str, entries: list[HarEntry]) -> str:
    """Append entries to serialized archive text.

    Splices the new entries in front of the closing brackets when the text
    was produced by :func:`dumps_archive`; the result is byte-for-byte what
    :func:`append_entries_slow` returns. Any other layout takes the slow path.
    """
    if not entries:
        return existing_text
    if not can_splice(existing_text):
        logger.debug("Archive layout not spliceable, falling back to full rewrite")
        return append_entries_slow(existing_text, entries)
    head = existing_text[: len(existing_text) - len(_CLOSING)]
    return head + ",\n" + _entries_block(entries) + _CLOSING
