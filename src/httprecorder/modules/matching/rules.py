"""Rule-based matching of live requests against recorded messages."""

from __future__ import annotations

import json
import logging
import threading
from collections import Counter
from collections.abc import Callable
from urllib.parse import parse_qsl, urlsplit

from httprecorder.errors import NoMatchingInteractionError
from httprecorder.modules.interaction import (
    Interaction,
    InteractionMessage,
    RecordedRequest,
    header_values,
)

logger = logging.getLogger(__name__)

MatchRule = Callable[[RecordedRequest, InteractionMessage], bool]


def _default_port(scheme: str) -> int | None:
    return {"http": 80, "https": 443}.get(scheme)


def urls_equal(left: str, right: str, ignore_query_order: bool = True) -> bool:
    """Compare scheme, host, port, path and query of two URLs.

    Scheme and host are case-insensitive and default ports are normalized.
    With ``ignore_query_order`` the query strings must hold the same multiset
    of ``(name, value)`` pairs.
    """
    a, b = urlsplit(left), urlsplit(right)
    scheme_a, scheme_b = a.scheme.lower(), b.scheme.lower()
    if scheme_a != scheme_b:
        return False
    if (a.hostname or "") != (b.hostname or ""):
        return False
    if (a.port or _default_port(scheme_a)) != (b.port or _default_port(scheme_b)):
        return False
    if (a.path or "/") != (b.path or "/"):
        return False
    if ignore_query_order:
        return Counter(parse_qsl(a.query, keep_blank_values=True)) == Counter(
            parse_qsl(b.query, keep_blank_values=True)
        )
    return a.query == b.query


def by_http_method(request: RecordedRequest, message: InteractionMessage) -> bool:
    return request.method.upper() == message.request.method.upper()


def by_request_url(ignore_query_order: bool = True) -> MatchRule:
    def rule(request: RecordedRequest, message: InteractionMessage) -> bool:
        return urls_equal(request.url, message.request.url, ignore_query_order)

    return rule


def by_header(name: str) -> MatchRule:
    """Values of ``name`` must be equal, in order. Other headers are ignored."""

    def rule(request: RecordedRequest, message: InteractionMessage) -> bool:
        return header_values(request.headers, name) == header_values(
            message.request.headers, name
        )

    return rule


def by_content(request: RecordedRequest, message: InteractionMessage) -> bool:
    return request.body == message.request.body


def by_json_content(request: RecordedRequest, message: InteractionMessage) -> bool:
    """Bodies must parse to equal JSON values; unparseable bodies compare as bytes."""
    try:
        return json.loads(request.body or b"null") == json.loads(message.request.body or b"null")
    except (UnicodeDecodeError, json.JSONDecodeError):
        return request.body == message.request.body


class RulesMatcher:
    """Matches when every configured rule agrees.

    Builder methods return a new matcher, so a configured matcher can be shared
    as a template. Consumption state for ``match_once`` is per instance and
    keyed by interaction name.
    """

    def __init__(self, rules: tuple[MatchRule, ...] = (), once: bool = True):
        self._rules = rules
        self.once = once
        self._consumed: dict[str, set[int]] = {}
        self._lock = threading.Lock()

    @classmethod
    def match_once(cls) -> RulesMatcher:
        """Each recorded message satisfies at most one request."""
        return cls(once=True)

    @classmethod
    def match_multiple(cls) -> RulesMatcher:
        """Recorded messages can be returned any number of times."""
        return cls(once=False)

    @classmethod
    def default(cls) -> RulesMatcher:
        return cls.match_once().by_http_method().by_request_url()

    def by(self, rule: MatchRule) -> RulesMatcher:
        """Add a custom rule."""
        return RulesMatcher(self._rules + (rule,), self.once)

    def by_http_method(self) -> RulesMatcher:
        return self.by(by_http_method)

    def by_request_url(self, ignore_query_order: bool = True) -> RulesMatcher:
        return self.by(by_request_url(ignore_query_order))

    def by_header(self, name: str) -> RulesMatcher:
        return self.by(by_header(name))

    def by_content(self) -> RulesMatcher:
        return self.by(by_content)

    def by_json_content(self) -> RulesMatcher:
        return self.by(by_json_content)

    def reset(self, interaction_name: str | None = None) -> None:
        """Forget consumed messages for one interaction, or for all."""
        with self._lock:
            if interaction_name is None:
                self._consumed.clear()
            else:
                self._consumed.pop(interaction_name, None)

    def match(self, request: RecordedRequest, interaction: Interaction) -> InteractionMessage:
        """Return the first matching message or raise :class:`NoMatchingInteractionError`."""
        with self._lock:
            consumed = self._consumed.setdefault(interaction.name, set())
            for index, message in enumerate(interaction.messages):
                if self.once and index in consumed:
                    continue
                if all(rule(request, message) for rule in self._rules):
                    if self.once:
                        consumed.add(index)
                    logger.debug(
                        "Matched %s %s to message #%d of %s",
                        request.method,
                        request.url,
                        index,
                        interaction.name,
                    )
                    return message

        raise NoMatchingInteractionError(request.method, request.url, interaction.name)
