"""Domain model for captured HTTP exchanges."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

Headers = list[tuple[str, str]]


def header_values(headers: Headers, name: str) -> list[str]:
    """Return every value of ``name`` in order, matching case-insensitively."""
    lowered = name.lower()
    return [value for key, value in headers if key.lower() == lowered]


def first_header(headers: Headers, name: str, default: str = "") -> str:
    """Return the first value of ``name`` or ``default``."""
    values = header_values(headers, name)
    return values[0] if values else default


@dataclass(frozen=True)
class RecordedRequest:
    """Outgoing request as it was sent."""

    method: str
    url: str
    headers: Headers = field(default_factory=list)
    body: bytes = b""
    http_version: str = "HTTP/1.1"

    @property
    def content_type(self) -> str:
        return first_header(self.headers, "content-type")


@dataclass(frozen=True)
class RecordedResponse:
    """Response as it was received, body kept in its raw (wire) encoding."""

    status_code: int
    reason_phrase: str = ""
    headers: Headers = field(default_factory=list)
    body: bytes = b""
    http_version: str = "HTTP/1.1"

    @property
    def content_length(self) -> int:
        return len(self.body)

    @property
    def content_type(self) -> str:
        return first_header(self.headers, "content-type")


@dataclass(frozen=True)
class MessageTimings:
    """Wall-clock start and elapsed duration (seconds) of one call."""

    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    elapsed: float = 0.0


@dataclass(frozen=True)
class InteractionMessage:
    """Single request/response pair."""

    request: RecordedRequest
    response: RecordedResponse
    timings: MessageTimings = field(default_factory=MessageTimings)


@dataclass
class Interaction:
    """Named, ordered list of messages from one recording session."""

    name: str
    messages: list[InteractionMessage] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.messages)

    def append(self, message: InteractionMessage) -> None:
        self.messages.append(message)
