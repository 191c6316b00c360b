"""
In-memory item store.

Keeps items in insertion order in a dict. Nothing survives the process.
"""

from collections.abc import Iterable

from cadence.domain.exceptions import ItemNotFound
from cadence.domain.interfaces import ItemRepository
from cadence.domain.models import Item, LearningConfig


class InMemoryItemRepository(ItemRepository):
    def __init__(
        self,
        items: Iterable[Item] | None = None,
        config: LearningConfig | None = None,
    ):
        self._items: dict[str, Item] = {item.id: item for item in items or []}
        self._config = config or LearningConfig()

    async def load_all(self) -> list[Item]:
        return list(self._items.values())

    async def get(self, item_id: str) -> Item:
        try:
            return self._items[item_id]
        except KeyError:
            raise ItemNotFound(item_id) from None

    async def save(self, item: Item) -> None:
        self._items[item.id] = item

    async def delete(self, item_id: str) -> None:
        if self._items.pop(item_id, None) is None:
            raise ItemNotFound(item_id)

    async def load_config(self) -> LearningConfig:
        return self._config

    async def save_config(self, config: LearningConfig) -> None:
        self._config = config
