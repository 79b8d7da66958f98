"""HTTP Archive (HAR 1.2) data model.

Every class mirrors one HAR object. ``to_dict`` emits lower camel case keys
in a fixed order and omits optional fields that are unset; ``from_dict``
validates required fields and raises :class:`MalformedArchiveError`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from httprecorder.errors import MalformedArchiveError

HAR_VERSION = "1.2"
SUPPORTED_VERSIONS = ("1.1", "1.2")


def _require(data: Any, key: str, kind: type | tuple[type, ...], where: str) -> Any:
    if not isinstance(data, dict):
        raise MalformedArchiveError(f"{where}: expected an object, got {type(data).__name__}")
    if key not in data:
        raise MalformedArchiveError(f"{where}: missing required field {key!r}")
    value = data[key]
    # bool is an int subclass and is never a valid HAR value here
    if isinstance(value, bool) or not isinstance(value, kind):
        raise MalformedArchiveError(f"{where}.{key}: unexpected type {type(value).__name__}")
    return value


def _optional(
    data: dict[str, Any],
    key: str,
    kind: type | tuple[type, ...],
    where: str,
    default: Any = None,
) -> Any:
    if data.get(key) is None:
        return default
    return _require(data, key, kind, where)


@dataclass
class HarNameValue:
    """Header, query string parameter or cookie."""

    name: str
    value: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "value": self.value}

    @classmethod
    def from_dict(cls, data: Any, where: str = "nameValue") -> HarNameValue:
        return cls(
            name=_require(data, "name", str, where),
            value=_require(data, "value", str, where),
        )


def _pairs_from(data: dict[str, Any], key: str, where: str) -> list[HarNameValue]:
    items = _require(data, key, list, where)
    return [HarNameValue.from_dict(item, f"{where}.{key}[{i}]") for i, item in enumerate(items)]


def _optional_pairs_from(data: dict[str, Any], key: str, where: str) -> list[HarNameValue]:
    if data.get(key) is None:
        return []
    return _pairs_from(data, key, where)


@dataclass
class HarPostData:
    """Request body. ``encoding`` is a custom field set to ``base64`` for binary."""

    mime_type: str = ""
    text: str = ""
    params: list[HarNameValue] = field(default_factory=list)
    encoding: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"mimeType": self.mime_type, "text": self.text}
        if self.params:
            data["params"] = [param.to_dict() for param in self.params]
        if self.encoding:
            data["_encoding"] = self.encoding
        return data

    @classmethod
    def from_dict(cls, data: Any, where: str = "postData") -> HarPostData:
        return cls(
            mime_type=_require(data, "mimeType", str, where),
            text=_optional(data, "text", str, where, ""),
            params=_optional_pairs_from(data, "params", where),
            encoding=_optional(data, "_encoding", str, where),
        )


@dataclass
class HarRequest:
    method: str
    url: str
    http_version: str = "HTTP/1.1"
    headers: list[HarNameValue] = field(default_factory=list)
    query_string: list[HarNameValue] = field(default_factory=list)
    cookies: list[HarNameValue] = field(default_factory=list)
    post_data: HarPostData | None = None
    headers_size: int = -1
    body_size: int = -1

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "method": self.method,
            "url": self.url,
            "httpVersion": self.http_version,
            "headers": [header.to_dict() for header in self.headers],
            "queryString": [param.to_dict() for param in self.query_string],
            "cookies": [cookie.to_dict() for cookie in self.cookies],
        }
        if self.post_data is not None:
            data["postData"] = self.post_data.to_dict()
        data["headersSize"] = self.headers_size
        data["bodySize"] = self.body_size
        return data

    @classmethod
    def from_dict(cls, data: Any, where: str = "request") -> HarRequest:
        post_data = _optional(data, "postData", dict, where)
        return cls(
            method=_require(data, "method", str, where),
            url=_require(data, "url", str, where),
            http_version=_optional(data, "httpVersion", str, where, "HTTP/1.1"),
            headers=_pairs_from(data, "headers", where),
            query_string=_optional_pairs_from(data, "queryString", where),
            cookies=_optional_pairs_from(data, "cookies", where),
            post_data=HarPostData.from_dict(post_data, f"{where}.postData")
            if post_data is not None
            else None,
            headers_size=_optional(data, "headersSize", int, where, -1),
            body_size=_optional(data, "bodySize", int, where, -1),
        )


@dataclass
class HarContent:
    size: int = 0
    mime_type: str = ""
    text: str | None = None
    encoding: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"size": self.size, "mimeType": self.mime_type}
        if self.text is not None:
            data["text"] = self.text
        if self.encoding:
            data["encoding"] = self.encoding
        return data

    @classmethod
    def from_dict(cls, data: Any, where: str = "content") -> HarContent:
        return cls(
            size=_require(data, "size", int, where),
            mime_type=_optional(data, "mimeType", str, where, ""),
            text=_optional(data, "text", str, where),
            encoding=_optional(data, "encoding", str, where),
        )


@dataclass
class HarResponse:
    status: int
    status_text: str = ""
    http_version: str = "HTTP/1.1"
    headers: list[HarNameValue] = field(default_factory=list)
    cookies: list[HarNameValue] = field(default_factory=list)
    content: HarContent = field(default_factory=HarContent)
    redirect_url: str = ""
    headers_size: int = -1
    body_size: int = -1

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "statusText": self.status_text,
            "httpVersion": self.http_version,
            "headers": [header.to_dict() for header in self.headers],
            "cookies": [cookie.to_dict() for cookie in self.cookies],
            "content": self.content.to_dict(),
            "redirectURL": self.redirect_url,
            "headersSize": self.headers_size,
            "bodySize": self.body_size,
        }

    @classmethod
    def from_dict(cls, data: Any, where: str = "response") -> HarResponse:
        return cls(
            status=_require(data, "status", int, where),
            status_text=_optional(data, "statusText", str, where, ""),
            http_version=_optional(data, "httpVersion", str, where, "HTTP/1.1"),
            headers=_pairs_from(data, "headers", where),
            cookies=_optional_pairs_from(data, "cookies", where),
            content=HarContent.from_dict(
                _require(data, "content", dict, where), f"{where}.content"
            ),
            redirect_url=_optional(data, "redirectURL", str, where, ""),
            headers_size=_optional(data, "headersSize", int, where, -1),
            body_size=_optional(data, "bodySize", int, where, -1),
        )


@dataclass
class HarTimings:
    """Per-phase timings in milliseconds; only ``wait`` is measured."""

    send: float = 0
    wait: float = 0
    receive: float = 0

    def to_dict(self) -> dict[str, Any]:
        return {"send": self.send, "wait": self.wait, "receive": self.receive}

    @classmethod
    def from_dict(cls, data: Any, where: str = "timings") -> HarTimings:
        number = (int, float)
        return cls(
            send=_optional(data, "send", number, where, 0),
            wait=_require(data, "wait", number, where),
            receive=_optional(data, "receive", number, where, 0),
        )


@dataclass
class HarEntry:
    started_date_time: str
    time: float
    request: HarRequest
    response: HarResponse
    timings: HarTimings = field(default_factory=HarTimings)

    def to_dict(self) -> dict[str, Any]:
        return {
            "startedDateTime": self.started_date_time,
            "time": self.time,
            "request": self.request.to_dict(),
            "response": self.response.to_dict(),
            "cache": {},
            "timings": self.timings.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Any, where: str = "entry") -> HarEntry:
        return cls(
            started_date_time=_require(data, "startedDateTime", str, where),
            time=_require(data, "time", (int, float), where),
            request=HarRequest.from_dict(
                _require(data, "request", dict, where), f"{where}.request"
            ),
            response=HarResponse.from_dict(
                _require(data, "response", dict, where), f"{where}.response"
            ),
            timings=HarTimings.from_dict(
                _require(data, "timings", dict, where), f"{where}.timings"
            ),
        )


@dataclass
class HarCreator:
    name: str = "httprecorder"
    version: str = "0.1.0"

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "version": self.version}

    @classmethod
    def from_dict(cls, data: Any, where: str = "creator") -> HarCreator:
        return cls(
            name=_require(data, "name", str, where),
            version=_require(data, "version", str, where),
        )


@dataclass
class HarLog:
    version: str = HAR_VERSION
    creator: HarCreator = field(default_factory=HarCreator)
    entries: list[HarEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        # entries stays last: the splice append relies on it
        return {
            "version": self.version,
            "creator": self.creator.to_dict(),
            "entries": [entry.to_dict() for entry in self.entries],
        }

    @classmethod
    def from_dict(cls, data: Any, where: str = "log") -> HarLog:
        version = _require(data, "version", str, where)
        if version not in SUPPORTED_VERSIONS:
            raise MalformedArchiveError(f"{where}.version: unsupported HAR version {version!r}")
        entries = _require(data, "entries", list, where)
        return cls(
            version=version,
            creator=HarCreator.from_dict(
                _require(data, "creator", dict, where), f"{where}.creator"
            ),
            entries=[
                HarEntry.from_dict(entry, f"{where}.entries[{i}]")
                for i, entry in enumerate(entries)
            ],
        )


@dataclass
class HttpArchive:
    """Top-level HAR document."""

    log: HarLog = field(default_factory=HarLog)

    @property
    def entries(self) -> list[HarEntry]:
        return self.log.entries

    def to_dict(self) -> dict[str, Any]:
        return {"log": self.log.to_dict()}

    @classmethod
    def from_dict(cls, data: Any) -> HttpArchive:
        return cls(log=HarLog.from_dict(_require(data, "log", dict, "archive")))
