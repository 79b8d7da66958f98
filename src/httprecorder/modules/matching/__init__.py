"""Matcher -- decide which recorded message answers a live request."""

from .base import Matcher
from .rules import (
    MatchRule,
    RulesMatcher,
    by_content,
    by_header,
    by_http_method,
    by_json_content,
    by_request_url,
    urls_equal,
)

__all__ = [
    "Matcher",
    "MatchRule",
    "RulesMatcher",
    "by_content",
    "by_header",
    "by_http_method",
    "by_json_content",
    "by_request_url",
    "urls_equal",
]
