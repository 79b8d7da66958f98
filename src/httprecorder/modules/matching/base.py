"""Matcher contract."""

from typing import Protocol

from httprecorder.modules.interaction import Interaction, InteractionMessage, RecordedRequest


class Matcher(Protocol):
    def match(self, request: RecordedRequest, interaction: Interaction) -> InteractionMessage:
        """Return the recorded message answering ``request`` or raise
        :class:`~httprecorder.errors.NoMatchingInteractionError`."""
        ...

    def reset(self, interaction_name: str | None = None) -> None:
        """Start a fresh replay session."""
        ...
