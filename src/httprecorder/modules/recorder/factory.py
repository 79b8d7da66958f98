"""Build recorder transports that trace traffic through a logger."""

import logging

import httpx

from httprecorder.modules.repository import InteractionRepository, LoggerInteractionRepository

from .modes import ExecutionMode, RecorderConfig
from .transport import RecorderTransport

TRACE_LEVEL = logging.DEBUG


def create_logging_transport(
    name: str,
    logger: logging.Logger,
    transport: httpx.AsyncBaseTransport | None = None,
    install_when_disabled: bool = False,
    repository: InteractionRepository | None = None,
    level: int = TRACE_LEVEL,
) -> httpx.AsyncBaseTransport:
    """Return a transport that records every call into ``logger``'s trace sink.

    When ``logger`` is not enabled for ``level`` the inner transport is
    returned as is, unless ``install_when_disabled`` asks for a recorder that
    starts tracing once the level is enabled later.
    """
    inner = transport if transport is not None else httpx.AsyncHTTPTransport()
    if not install_when_disabled and not logger.isEnabledFor(level):
        return inner

    config = RecorderConfig(interaction_name=name, mode=ExecutionMode.RECORD)
    return RecorderTransport(
        config,
        transport=inner,
        repository=repository
        if repository is not None
        else LoggerInteractionRepository(logger, level=level),
    )
