"""httpx transport that records, replays or passes through HTTP calls."""

import asyncio
import logging
import time
from datetime import UTC, datetime

import httpx

from httprecorder.modules.anonymize import Anonymizer, RulesAnonymizer
from httprecorder.modules.interaction import (
    Interaction,
    InteractionMessage,
    MessageTimings,
    build_response,
    capture_request,
    capture_response,
    read_raw_body,
)
from httprecorder.modules.matching import Matcher, RulesMatcher
from httprecorder.modules.repository import (
    HttpArchiveRepository,
    InteractionRepository,
    NullInteractionRepository,
)
from httprecorder.utils.debug import debug_exchange, debug_print

from .modes import ExecutionMode, RecorderConfig, read_mode_override

logger = logging.getLogger(__name__)


def default_repository(config: RecorderConfig) -> InteractionRepository:
    if not config.enabled:
        return NullInteractionRepository()
    return HttpArchiveRepository(config.archive_dir, fast_append=config.fast_append)


class RecorderTransport(httpx.AsyncBaseTransport):
    """Intercepts requests ahead of the real transport.

    The execution mode is resolved on the first request and cached for the
    life of the transport.
    """

    def __init__(
        self,
        config: RecorderConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        matcher: Matcher | None = None,
        repository: InteractionRepository | None = None,
        anonymizer: Anonymizer | None = None,
    ):
        self.config = config
        self._transport = transport
        self.matcher = matcher if matcher is not None else RulesMatcher.default()
        self.anonymizer = anonymizer if anonymizer is not None else RulesAnonymizer.default()
        self.repository = repository if repository is not None else default_repository(config)
        self._mode: ExecutionMode | None = None
        self._mode_lock = asyncio.Lock()
        self._replay_interaction: Interaction | None = None
        self._load_lock = asyncio.Lock()

    @property
    def transport(self) -> httpx.AsyncBaseTransport:
        """Inner transport, created on first use when none was given."""
        if self._transport is None:
            self._transport = httpx.AsyncHTTPTransport()
        return self._transport

    @property
    def interaction_name(self) -> str:
        return self.config.interaction_name

    @property
    def resolved_mode(self) -> ExecutionMode | None:
        """Mode in effect, or None before the first request."""
        return self._mode

    async def resolve_mode(self) -> ExecutionMode:
        """Resolve once: override first, then the configured mode, then AUTO's check."""
        if self._mode is not None:
            return self._mode
        async with self._mode_lock:
            if self._mode is None:
                mode = read_mode_override(self.config.override_env_var) or self.config.mode
                if mode is ExecutionMode.AUTO:
                    exists = await self.repository.exists(self.interaction_name)
                    mode = ExecutionMode.REPLAY if exists else ExecutionMode.RECORD
                self._mode = mode
                logger.info("Interaction %r resolved to %s mode", self.interaction_name, mode.value)
                debug_print("mode", f"{self.interaction_name} -> {mode.value}")
        return self._mode

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self.dispatch(request, self.transport)

    async def dispatch(
        self, request: httpx.Request, transport: httpx.AsyncBaseTransport
    ) -> httpx.Response:
        """Handle ``request`` using ``transport`` for anything that reaches the network."""
        mode = await self.resolve_mode()
        if mode is ExecutionMode.RECORD:
            return await self._record(request, transport)
        if mode is ExecutionMode.REPLAY:
            return await self._replay(request)
        return await self._passthrough(request, transport)

    async def aclose(self) -> None:
        if self._transport is not None:
            await self._transport.aclose()

    async def _passthrough(
        self, request: httpx.Request, transport: httpx.AsyncBaseTransport
    ) -> httpx.Response:
        response = await transport.handle_async_request(request)
        body = await read_raw_body(response)
        return build_response(capture_response(response, body), request)

    async def _record(
        self, request: httpx.Request, transport: httpx.AsyncBaseTransport
    ) -> httpx.Response:
        recorded_request = await capture_request(request)
        started_at = datetime.now(UTC)
        start = time.monotonic()
        response = await transport.handle_async_request(request)
        body = await read_raw_body(response)
        elapsed = time.monotonic() - start

        message = InteractionMessage(
            request=recorded_request,
            response=capture_response(response, body),
            timings=MessageTimings(started_at=started_at, elapsed=elapsed),
        )
        interaction = Interaction(name=self.interaction_name, messages=[message])
        interaction = await self.anonymizer.anonymize(interaction)
        if await self.repository.store(interaction) is None:
            logger.debug("Repository stored nothing for %s %s", request.method, request.url)

        debug_exchange("record", request.method, str(request.url), response.status_code, elapsed)
        return build_response(message.response, request, message.timings)

    async def _replay(self, request: httpx.Request) -> httpx.Response:
        interaction = await self._load_interaction()
        live_request = await capture_request(request)
        if self.config.anonymize_live_requests:
            live_request = self.anonymizer.anonymize_request(live_request)

        message = self.matcher.match(live_request, interaction)
        debug_exchange("replay", request.method, str(request.url), message.response.status_code)
        return build_response(message.response, request, message.timings)

    async def _load_interaction(self) -> Interaction:
        if self._replay_interaction is not None:
            return self._replay_interaction
        async with self._load_lock:
            if self._replay_interaction is None:
                interaction = await self.repository.load(self.interaction_name)
                self.matcher.reset(self.interaction_name)
                self._replay_interaction = interaction
                logger.debug(
                    "Replaying %d message(s) from %r", len(interaction), self.interaction_name
                )
        return self._replay_interaction
