"""Anonymizer -- redact sensitive values before interactions are persisted."""

from .base import Anonymizer
from .rules import (
    MASK_CHAR,
    SENTINEL,
    MessageRule,
    RulesAnonymizer,
    mask_bytes,
    mask_encoded_body,
    mask_headers,
    mask_query_parameter,
    mask_text,
)

__all__ = [
    "Anonymizer",
    "MASK_CHAR",
    "SENTINEL",
    "MessageRule",
    "RulesAnonymizer",
    "mask_bytes",
    "mask_encoded_body",
    "mask_headers",
    "mask_query_parameter",
    "mask_text",
]
