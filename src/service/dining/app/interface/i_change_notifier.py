from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Any


class IChangeNotifier(ABC):
    """Fire-and-forget change events on the `restaurant_{id}` channel"""

    @abstractmethod
    async def publish(self, *, channel: str, event: dict[str, Any]) -> None:
        """
        Publish one event

        Args:
            channel: Channel name, `restaurant_{id}`
            event: JSON-serializable payload
        """
        pass

    @abstractmethod
    def subscribe(self, *, channel: str) -> AsyncIterator[dict[str, Any]]:
        """
        Yield events published on the channel until the consumer stops iterating

        Args:
            channel: Channel name, `restaurant_{id}`
        """
        pass


def restaurant_channel(restaurant_id: int) -> str:
    return f'restaurant_{restaurant_id}'
