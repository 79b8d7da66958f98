"""Conversion between httpx objects and recorded messages."""

import httpx

from .models import Headers, MessageTimings, RecordedRequest, RecordedResponse


def _raw_headers(headers: httpx.Headers) -> Headers:
    return [(key, value) for key, value in headers.multi_items()]


async def capture_request(request: httpx.Request) -> RecordedRequest:
    """Snapshot an outgoing request, reading a streamed body if needed."""
    body = await request.aread()
    return RecordedRequest(
        method=request.method,
        url=str(request.url),
        headers=_raw_headers(request.headers),
        body=body,
    )


async def read_raw_body(response: httpx.Response) -> bytes:
    """Drain a transport-level response without applying content decoding."""
    # Iterate the stream itself: responses built with ``content=`` are already
    # marked consumed, but their byte stream can still be replayed.
    try:
        chunks = [chunk async for chunk in response.stream]
    finally:
        await response.aclose()
    return b"".join(chunks)


def capture_response(response: httpx.Response, body: bytes) -> RecordedResponse:
    """Snapshot a response whose raw body has already been read."""
    http_version = response.extensions.get("http_version", b"HTTP/1.1")
    if isinstance(http_version, bytes):
        http_version = http_version.decode("ascii", errors="replace")
    return RecordedResponse(
        status_code=response.status_code,
        reason_phrase=response.reason_phrase,
        headers=_raw_headers(response.headers),
        body=body,
        http_version=http_version,
    )


def build_response(
    recorded: RecordedResponse,
    request: httpx.Request,
    timings: MessageTimings | None = None,
) -> httpx.Response:
    """Rebuild an httpx response from a recorded one.

    The body is fully buffered and ``Content-Length`` always reflects it
    (``HEAD`` excepted), so the caller can read the result exactly like a
    fresh network response, as many times as it likes.
    """
    headers = httpx.Headers(recorded.headers)
    if request.method.upper() != "HEAD":
        headers["Content-Length"] = str(len(recorded.body))

    extensions = {
        "http_version": recorded.http_version.encode("ascii", errors="replace"),
        "reason_phrase": recorded.reason_phrase.encode("latin-1", errors="replace"),
    }
    if timings is not None:
        extensions["httprecorder_elapsed"] = timings.elapsed

    return httpx.Response(
        status_code=recorded.status_code,
        headers=headers,
        stream=httpx.ByteStream(recorded.body),
        request=request,
        extensions=extensions,
    )
