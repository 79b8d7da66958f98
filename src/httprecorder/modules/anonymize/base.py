"""Anonymizer contract."""

from typing import Protocol

from httprecorder.modules.interaction import Interaction, RecordedRequest


class Anonymizer(Protocol):
    async def anonymize(self, interaction: Interaction) -> Interaction:
        """Return a redacted copy of ``interaction``."""
        ...

    def anonymize_request(self, request: RecordedRequest) -> RecordedRequest:
        """Redact a live request the same way recorded requests are redacted."""
        ...
