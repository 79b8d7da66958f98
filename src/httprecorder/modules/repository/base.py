"""Persistence contract shared by every repository variant."""

from typing import Protocol, runtime_checkable

from httprecorder.modules.interaction import Interaction


@runtime_checkable
class InteractionRepository(Protocol):
    """Reads and writes interactions by name."""

    async def exists(self, name: str) -> bool:
        """Whether an interaction named ``name`` can be loaded."""
        ...

    async def load(self, name: str) -> Interaction:
        """Load the whole interaction."""
        ...

    async def store(self, interaction: Interaction) -> Interaction | None:
        """Persist the interaction; ``None`` means nothing was stored."""
        ...
