"""Repository used when recording is disabled."""

from httprecorder.errors import NoSuchInteractionError
from httprecorder.modules.interaction import Interaction


class NullInteractionRepository:
    """Never finds, never stores."""

    async def exists(self, name: str) -> bool:
        return False

    async def load(self, name: str) -> Interaction:
        raise NoSuchInteractionError(name)

    async def store(self, interaction: Interaction) -> Interaction | None:
        return None
