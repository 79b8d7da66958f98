"""Archive model -- HAR documents, projection from interactions, serialization."""

from .convert import (
    archive_to_interaction,
    archive_to_messages,
    entry_to_message,
    interaction_to_archive,
    message_to_entry,
)
from .har import (
    HAR_VERSION,
    HarContent,
    HarCreator,
    HarEntry,
    HarLog,
    HarNameValue,
    HarPostData,
    HarRequest,
    HarResponse,
    HarTimings,
    HttpArchive,
)
from .serialize import (
    append_entries,
    append_entries_slow,
    can_splice,
    dumps_archive,
    loads_archive,
)

__all__ = [
    "HAR_VERSION",
    "HarContent",
    "HarCreator",
    "HarEntry",
    "HarLog",
    "HarNameValue",
    "HarPostData",
    "HarRequest",
    "HarResponse",
    "HarTimings",
    "HttpArchive",
    "append_entries",
    "append_entries_slow",
    "archive_to_interaction",
    "archive_to_messages",
    "can_splice",
    "dumps_archive",
    "entry_to_message",
    "interaction_to_archive",
    "loads_archive",
    "message_to_entry",
]
