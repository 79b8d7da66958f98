"""Interaction model -- captured request/response pairs and httpx conversion."""

from .httpx_bridge import build_response, capture_request, capture_response, read_raw_body
from .models import (
    Headers,
    Interaction,
    InteractionMessage,
    MessageTimings,
    RecordedRequest,
    RecordedResponse,
    first_header,
    header_values,
)

__all__ = [
    "Headers",
    "Interaction",
    "InteractionMessage",
    "MessageTimings",
    "RecordedRequest",
    "RecordedResponse",
    "build_response",
    "capture_request",
    "capture_response",
    "first_header",
    "header_values",
    "read_raw_body",
]
