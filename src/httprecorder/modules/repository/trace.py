"""Human-readable dumps of captured messages."""

from httprecorder.modules.interaction import InteractionMessage

_BINARY_PREVIEW = 64


def _body_text(body: bytes) -> str:
    if not body:
        return "(empty body)"
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError:
        return f"(binary body, {len(body)} bytes) {body[:_BINARY_PREVIEW].hex()}"


def format_message(message: InteractionMessage) -> str:
    """Render a message roughly as it looked on the wire."""
    request, response, timings = message.request, message.response, message.timings
    lines = [
        f"# {timings.started_at.isoformat()} ({timings.elapsed * 1000:.1f} ms)",
        "",
        f"{request.method} {request.url} {request.http_version}",
        *(f"{name}: {value}" for name, value in request.headers),
        "",
        _body_text(request.body),
        "",
        f"{response.http_version} {response.status_code} {response.reason_phrase}".rstrip(),
        *(f"{name}: {value}" for name, value in response.headers),
        "",
        _body_text(response.body),
        "",
    ]
    return "\n".join(lines)
