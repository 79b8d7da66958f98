"""Rule-based redaction of sensitive data in interactions."""

from __future__ import annotations

import gzip
import logging
import re
import zlib
from collections.abc import Callable
from dataclasses import replace
from urllib.parse import quote, unquote_plus, urlsplit, urlunsplit

from httprecorder.modules.interaction import (
    Headers,
    Interaction,
    InteractionMessage,
    RecordedRequest,
    RecordedResponse,
    header_values,
)

logger = logging.getLogger(__name__)

SENTINEL = "********"
MASK_CHAR = "*"

MessageRule = Callable[[InteractionMessage], InteractionMessage]


def mask_headers(headers: Headers, name: str, sentinel: str = SENTINEL) -> Headers:
    """Replace every value of header ``name`` (case-insensitive) with ``sentinel``."""
    lowered = name.lower()
    return [(key, sentinel if key.lower() == lowered else value) for key, value in headers]


def _mask_run(segment: str, mask_char: str) -> str:
    # one mask char per UTF-8 byte, so the encoded body keeps its size
    return "".join(mask_char * len(char.encode("utf-8")) for char in segment)


def mask_text(text: str, pattern: re.Pattern[str], mask_char: str = MASK_CHAR) -> str:
    """Mask every participating group of each match (the whole match when the
    pattern has no groups), keeping the UTF-8 length of the text unchanged."""

    def _sub(match: re.Match[str]) -> str:
        whole = match.group(0)
        if not pattern.groups:
            return _mask_run(whole, mask_char)
        offset = match.start(0)
        # right to left, so earlier spans keep their offsets
        spans = sorted(
            (match.span(group) for group in range(1, pattern.groups + 1)), reverse=True
        )
        for start, end in spans:
            if start >= 0:
                masked = _mask_run(whole[start - offset : end - offset], mask_char)
                whole = whole[: start - offset] + masked + whole[end - offset :]
        return whole

    return pattern.sub(_sub, text)


def mask_bytes(body: bytes, pattern: re.Pattern[str], mask_char: str = MASK_CHAR) -> bytes:
    """Mask a UTF-8 body; anything that does not decode is returned untouched."""
    if not body:
        return body
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError:
        return body
    masked = mask_text(text, pattern, mask_char)
    return body if masked == text else masked.encode("utf-8")


def _inflate(data: bytes) -> bytes:
    try:
        return zlib.decompress(data)
    except zlib.error:
        # raw deflate stream without the zlib header
        return zlib.decompress(data, -zlib.MAX_WBITS)


_CODECS: dict[str, tuple[Callable[[bytes], bytes], Callable[[bytes], bytes]]] = {
    "gzip": (gzip.decompress, lambda data: gzip.compress(data, mtime=0)),
    "x-gzip": (gzip.decompress, lambda data: gzip.compress(data, mtime=0)),
    "deflate": (_inflate, zlib.compress),
}


def mask_encoded_body(
    body: bytes,
    content_encoding: str,
    pattern: re.Pattern[str],
    mask_char: str = MASK_CHAR,
) -> bytes:
    """Mask a body stored in its wire encoding.

    gzip and deflate bodies are decoded, masked and encoded again; the decoded
    length is preserved. Bodies in an encoding that cannot be decoded here are
    returned untouched and a warning is logged.
    """
    if not body:
        return body
    codings = [c.strip().lower() for c in content_encoding.split(",")]
    codings = [c for c in codings if c and c != "identity"]
    if not codings:
        return mask_bytes(body, pattern, mask_char)

    unsupported = [c for c in codings if c not in _CODECS]
    if unsupported:
        logger.warning("Body left unmasked: unsupported Content-Encoding %s", unsupported)
        return body

    decoded = body
    try:
        for coding in reversed(codings):
            decoded = _CODECS[coding][0](decoded)
    except (OSError, EOFError, zlib.error) as exc:
        logger.warning("Body left unmasked: cannot decode %s body (%s)", content_encoding, exc)
        return body

    masked = mask_bytes(decoded, pattern, mask_char)
    if masked is decoded:
        return body
    for coding in codings:
        masked = _CODECS[coding][1](masked)
    return masked


def mask_query_parameter(url: str, name: str, sentinel: str = SENTINEL) -> str:
    """Replace the value of every ``name`` query parameter, keeping parameter order.

    Keys are compared after percent-decoding.
    """
    parts = urlsplit(url)
    if not parts.query:
        return url
    pieces = []
    for piece in parts.query.split("&"):
        key, sep, _ = piece.partition("=")
        if sep and unquote_plus(key) == name:
            piece = f"{key}={quote(sentinel, safe='*')}"
        pieces.append(piece)
    return urlunsplit(parts._replace(query="&".join(pieces)))


class RulesAnonymizer:
    """Applies redaction rules to every message of an interaction.

    All built-in rules are idempotent: a masked value masks to itself.
    """

    def __init__(self, rules: tuple[MessageRule, ...] = ()):
        self._rules = rules

    @classmethod
    def default(cls) -> RulesAnonymizer:
        """Mask credentials and session cookies."""
        return (
            cls()
            .anonymize_request_header("Authorization")
            .anonymize_request_header("Proxy-Authorization")
            .anonymize_request_header("Cookie")
            .anonymize_response_header("Set-Cookie")
            .mask_form_field("password")
        )

    def with_rule(self, rule: MessageRule) -> RulesAnonymizer:
        return RulesAnonymizer(self._rules + (rule,))

    def anonymize_request_header(self, name: str) -> RulesAnonymizer:
        def rule(message: InteractionMessage) -> InteractionMessage:
            request = replace(message.request, headers=mask_headers(message.request.headers, name))
            return replace(message, request=request)

        return self.with_rule(rule)

    def anonymize_response_header(self, name: str) -> RulesAnonymizer:
        def rule(message: InteractionMessage) -> InteractionMessage:
            response = replace(
                message.response, headers=mask_headers(message.response.headers, name)
            )
            return replace(message, response=response)

        return self.with_rule(rule)

    def anonymize_request_query_string_parameter(self, name: str) -> RulesAnonymizer:
        def rule(message: InteractionMessage) -> InteractionMessage:
            request = replace(message.request, url=mask_query_parameter(message.request.url, name))
            return replace(message, request=request)

        return self.with_rule(rule)

    def mask_body(
        self, pattern: str | re.Pattern[str], mask_char: str = MASK_CHAR
    ) -> RulesAnonymizer:
        """Mask matches in request and response bodies without changing their decoded length."""
        if len(mask_char.encode("utf-8")) != 1:
            raise ValueError(f"mask_char must be a single ASCII character, got {mask_char!r}")
        compiled = re.compile(pattern) if isinstance(pattern, str) else pattern

        def _mask(body: bytes, headers: Headers) -> bytes:
            encoding = ", ".join(header_values(headers, "content-encoding"))
            return mask_encoded_body(body, encoding, compiled, mask_char)

        def rule(message: InteractionMessage) -> InteractionMessage:
            request = replace(
                message.request, body=_mask(message.request.body, message.request.headers)
            )
            response = replace(
                message.response, body=_mask(message.response.body, message.response.headers)
            )
            return replace(message, request=request, response=response)

        return self.with_rule(rule)

    def mask_form_field(self, name: str, mask_char: str = MASK_CHAR) -> RulesAnonymizer:
        """Mask ``name=value`` pairs (form bodies) and ``"name": "value"`` (JSON bodies)."""
        field = re.escape(name)
        pattern = re.compile(
            rf'(?:(?<![\w-]){field}=([^&\s]*))|(?:"{field}"\s*:\s*"((?:[^"\\]|\\.)*)")'
        )
        return self.mask_body(pattern, mask_char)

    def anonymize_message(self, message: InteractionMessage) -> InteractionMessage:
        for rule in self._rules:
            message = rule(message)
        return message

    def anonymize_request(self, request: RecordedRequest) -> RecordedRequest:
        """Apply the rules to a live request, so it compares equal to masked recordings."""
        message = InteractionMessage(request=request, response=RecordedResponse(status_code=0))
        return self.anonymize_message(message).request

    async def anonymize(self, interaction: Interaction) -> Interaction:
        return Interaction(
            name=interaction.name,
            messages=[self.anonymize_message(message) for message in interaction.messages],
        )

