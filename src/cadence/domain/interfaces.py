"""
Ports (interfaces) for item persistence.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from .models import Item, LearningConfig


class ItemRepository(ABC):
    """
    Port for loading and persisting items and the learning configuration.

    Implementations:
        - InMemoryItemRepository: Process-local dict, used by tests and `--backend memory`.
        - JsonItemRepository: Single JSON document on disk.

    Every method may raise StorageError. Nothing is retried.
    """

    @abstractmethod
    async def load_all(self) -> list[Item]:
        """Return every item in the collection."""
        pass

    async def load_due(self, now: datetime) -> list[Item]:
        """
        Return items whose next review date is at or before `now`.

        Adapters with an index on the due date should override this.
        """
        return [item for item in await self.load_all() if item.is_due(now)]

    @abstractmethod
    async def get(self, item_id: str) -> Item:
        """
        Fetch a single item.

        Raises:
            ItemNotFound: If no item has that id.
        """
        pass

    @abstractmethod
    async def save(self, item: Item) -> None:
        """Insert or replace an item by id."""
        pass

    @abstractmethod
    async def delete(self, item_id: str) -> None:
        """
        Remove an item.

        Raises:
            ItemNotFound: If no item has that id.
        """
        pass

    @abstractmethod
    async def load_config(self) -> LearningConfig:
        """
        Return the stored learning configuration.

        An invalid stored configuration is reported and replaced by defaults.
        """
        pass

    @abstractmethod
    async def save_config(self, config: LearningConfig) -> None:
        pass
