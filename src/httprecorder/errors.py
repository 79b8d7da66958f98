"""Exception hierarchy for HTTP recording and replay."""


class HttpRecorderError(Exception):
    """Base class for every error raised by httprecorder."""


class MalformedArchiveError(HttpRecorderError):
    """An archive on disk failed schema validation."""


class NoSuchInteractionError(HttpRecorderError):
    """Replay was requested for an interaction that was never stored."""

    def __init__(self, name: str):
        super().__init__(f"No stored interaction named {name!r}")
        self.name = name


class NoMatchingInteractionError(HttpRecorderError):
    """No recorded message matches the live request."""

    def __init__(self, method: str, url: str, interaction_name: str = ""):
        where = f" in interaction {interaction_name!r}" if interaction_name else ""
        super().__init__(f"Unable to find a matching interaction for request {method} {url}{where}")
        self.method = method
        self.url = url
        self.interaction_name = interaction_name


class MultipleActiveContextsError(HttpRecorderError):
    """A recording context was activated while another one is live."""


class PersistenceError(HttpRecorderError):
    """Reading or writing an archive failed; the cause is chained."""


class UnsupportedOperationError(HttpRecorderError):
    """The repository variant does not support the requested operation."""
