"""Projection between interactions and HTTP archives."""

import base64
from datetime import datetime
from urllib.parse import parse_qsl, urlsplit

from httprecorder.errors import MalformedArchiveError
from httprecorder.modules.interaction import (
    Interaction,
    InteractionMessage,
    MessageTimings,
    RecordedRequest,
    RecordedResponse,
)

from .har import (
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

BASE64 = "base64"
FORM_URLENCODED = "application/x-www-form-urlencoded"


def encode_body(body: bytes) -> tuple[str, str | None]:
    """Return ``(text, encoding)``; UTF-8 text is kept as is, anything else is base64."""
    try:
        return body.decode("utf-8"), None
    except UnicodeDecodeError:
        return base64.b64encode(body).decode("ascii"), BASE64


def decode_body(text: str | None, encoding: str | None, where: str) -> bytes:
    if not text:
        return b""
    if encoding is None:
        return text.encode("utf-8")
    if encoding != BASE64:
        raise MalformedArchiveError(f"{where}: unsupported body encoding {encoding!r}")
    try:
        return base64.b64decode(text, validate=True)
    except ValueError as exc:
        raise MalformedArchiveError(f"{where}: invalid base64 body") from exc


def _pairs(headers: list[tuple[str, str]]) -> list[HarNameValue]:
    return [HarNameValue(name, value) for name, value in headers]


def _query_string(url: str) -> list[HarNameValue]:
    query = urlsplit(url).query
    return [HarNameValue(name, value) for name, value in parse_qsl(query, keep_blank_values=True)]


def _headers_size(headers: list[tuple[str, str]]) -> int:
    return sum(len(name) + len(value) + 4 for name, value in headers) + 2


def _post_data(request: RecordedRequest) -> HarPostData | None:
    if not request.body:
        return None
    text, encoding = encode_body(request.body)
    mime_type = request.content_type
    params: list[HarNameValue] = []
    if encoding is None and mime_type.split(";")[0].strip().lower() == FORM_URLENCODED:
        params = [
            HarNameValue(name, value) for name, value in parse_qsl(text, keep_blank_values=True)
        ]
    return HarPostData(mime_type=mime_type, text=text, params=params, encoding=encoding)


def message_to_entry(message: InteractionMessage) -> HarEntry:
    """Project one message onto a HAR entry."""
    request, response, timings = message.request, message.response, message.timings
    elapsed_ms = round(timings.elapsed * 1000, 3)

    har_request = HarRequest(
        method=request.method,
        url=request.url,
        http_version=request.http_version,
        headers=_pairs(request.headers),
        query_string=_query_string(request.url),
        post_data=_post_data(request),
        headers_size=_headers_size(request.headers),
        body_size=len(request.body),
    )

    text, encoding = encode_body(response.body)
    har_response = HarResponse(
        status=response.status_code,
        status_text=response.reason_phrase,
        http_version=response.http_version,
        headers=_pairs(response.headers),
        content=HarContent(
            size=response.content_length,
            mime_type=response.content_type,
            text=text if response.body else None,
            encoding=encoding,
        ),
        redirect_url=next(
            (value for name, value in response.headers if name.lower() == "location"), ""
        ),
        headers_size=_headers_size(response.headers),
        body_size=response.content_length,
    )

    return HarEntry(
        started_date_time=timings.started_at.isoformat(),
        time=elapsed_ms,
        request=har_request,
        response=har_response,
        timings=HarTimings(send=0, wait=elapsed_ms, receive=0),
    )


def entry_to_message(entry: HarEntry, where: str = "entry") -> InteractionMessage:
    """Rebuild a message from a HAR entry."""
    try:
        started_at = datetime.fromisoformat(entry.started_date_time)
    except ValueError as exc:
        raise MalformedArchiveError(f"{where}.startedDateTime: invalid timestamp") from exc

    post_data = entry.request.post_data
    request_body = (
        decode_body(post_data.text, post_data.encoding, f"{where}.request.postData")
        if post_data is not None
        else b""
    )
    content = entry.response.content

    return InteractionMessage(
        request=RecordedRequest(
            method=entry.request.method,
            url=entry.request.url,
            headers=[(header.name, header.value) for header in entry.request.headers],
            body=request_body,
            http_version=entry.request.http_version,
        ),
        response=RecordedResponse(
            status_code=entry.response.status,
            reason_phrase=entry.response.status_text,
            headers=[(header.name, header.value) for header in entry.response.headers],
            body=decode_body(content.text, content.encoding, f"{where}.response.content"),
            http_version=entry.response.http_version,
        ),
        timings=MessageTimings(started_at=started_at, elapsed=entry.time / 1000),
    )


def interaction_to_archive(
    interaction: Interaction,
    creator: HarCreator | None = None,
) -> HttpArchive:
    """Build an archive with one entry per message, in call order."""
    return HttpArchive(
        log=HarLog(
            creator=creator or HarCreator(),
            entries=[message_to_entry(message) for message in interaction.messages],
        )
    )


def archive_to_messages(archive: HttpArchive) -> list[InteractionMessage]:
    """Rebuild messages from an archive, in entry order."""
    return [
        entry_to_message(entry, f"log.entries[{i}]") for i, entry in enumerate(archive.entries)
    ]


def archive_to_interaction(name: str, archive: HttpArchive) -> Interaction:
    return Interaction(name=name, messages=archive_to_messages(archive))
