"""Recording contexts -- at most one active recording/replay session."""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Any

import httpx

from httprecorder.errors import MultipleActiveContextsError
from httprecorder.modules.anonymize import Anonymizer
from httprecorder.modules.matching import Matcher
from httprecorder.modules.repository import InteractionRepository

from .modes import RecorderConfig
from .transport import RecorderTransport

logger = logging.getLogger(__name__)


class RecordingContext:
    """Handle for the active session; release it by leaving the ``with`` block."""

    def __init__(self, sessions: RecorderSessions, token: str, transport: RecorderTransport):
        self._sessions = sessions
        self.token = token
        self.transport = transport

    @property
    def config(self) -> RecorderConfig:
        return self.transport.config

    @property
    def active(self) -> bool:
        return self._sessions.current is self

    def client(self, **kwargs: Any) -> httpx.AsyncClient:
        """Build an ``httpx.AsyncClient`` routed through this context."""
        return httpx.AsyncClient(transport=self.transport, **kwargs)

    def release(self) -> None:
        self._sessions.release(self.token)

    def __enter__(self) -> RecordingContext:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()

    async def __aenter__(self) -> RecordingContext:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()

    def __repr__(self) -> str:
        name = self.config.interaction_name
        return f"RecordingContext(token={self.token!r}, interaction={name!r})"


class RecorderSessions:
    """Tracks the single live :class:`RecordingContext`.

    Activation is a check-and-set under a lock: a second activation while a
    context is live raises :class:`MultipleActiveContextsError` and leaves the
    live context untouched.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._current: RecordingContext | None = None

    @property
    def current(self) -> RecordingContext | None:
        return self._current

    def activate(
        self,
        config: RecorderConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        matcher: Matcher | None = None,
        repository: InteractionRepository | None = None,
        anonymizer: Anonymizer | None = None,
    ) -> RecordingContext:
        config = config if config is not None else RecorderConfig()
        with self._lock:
            if self._current is not None:
                raise MultipleActiveContextsError(
                    "Cannot activate multiple recording contexts at the same time "
                    f"(active: {self._current.config.interaction_name!r})"
                )
            recorder = RecorderTransport(
                config,
                transport=transport,
                matcher=matcher,
                repository=repository,
                anonymizer=anonymizer,
            )
            context = RecordingContext(self, uuid.uuid4().hex, recorder)
            self._current = context
        logger.info("Activated recording context for %r", config.interaction_name)
        return context

    def release(self, token: str) -> None:
        """Clear the slot. Releasing a stale token is a no-op."""
        with self._lock:
            if self._current is None or self._current.token != token:
                return
            name = self._current.config.interaction_name
            self._current = None
        logger.info("Released recording context for %r", name)


# Default manager for code that does not inject its own.
default_sessions = RecorderSessions()


def activate(config: RecorderConfig | None = None, **collaborators: Any) -> RecordingContext:
    """Activate a context on the default session manager."""
    return default_sessions.activate(config, **collaborators)


class ContextTransport(httpx.AsyncBaseTransport):
    """Long-lived hook that follows whichever context is active.

    With no active context requests go straight to ``transport``; otherwise the
    active context's recorder handles them, reaching the network through
    ``transport``.
    """

    def __init__(
        self,
        sessions: RecorderSessions | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.sessions = sessions if sessions is not None else default_sessions
        self.transport = transport if transport is not None else httpx.AsyncHTTPTransport()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        context = self.sessions.current
        if context is None:
            return await self.transport.handle_async_request(request)
        return await context.transport.dispatch(request, self.transport)

    async def aclose(self) -> None:
        await self.transport.aclose()
