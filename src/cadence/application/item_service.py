"""Service for creating and maintaining items outside of review."""

import logging
from dataclasses import replace

from ulid import ULID

from cadence.domain.clock import Clock, SystemClock
from cadence.domain.constants import ITEM_ID_PREFIX
from cadence.domain.interfaces import ItemRepository
from cadence.domain.models import Item

logger = logging.getLogger(__name__)


def generate_item_id() -> str:
    """Generate a stable, sortable item ID using ULID."""
    return f"{ITEM_ID_PREFIX}{ULID()}"


class ItemService:
    """
    Create, edit, delete and search items.

    Only `front` and `back` can be edited here; scheduling fields change
    exclusively through grading.
    """

    def __init__(self, repo: ItemRepository, clock: Clock | None = None):
        self._repo = repo
        self._clock = clock or SystemClock()

    async def create(self, front: str, back: str) -> Item:
        """Add a new item that is immediately eligible for review."""
        now = self._clock.now()
        item = Item(
            id=generate_item_id(),
            front=front,
            back=back,
            created_at=now,
            next_review_date=now,
        )
        await self._repo.save(item)
        logger.info(f"Created {item.id}")
        return item

    async def edit(self, item_id: str, front: str | None = None, back: str | None = None) -> Item:
        """
        Replace an item's text.

        Raises:
            ItemNotFound: If no item has that id.
        """
        item = await self._repo.get(item_id)
        changes = {}
        if front is not None:
            changes["front"] = front
        if back is not None:
            changes["back"] = back
        if not changes:
            return item

        updated = replace(item, **changes)
        await self._repo.save(updated)
        logger.info(f"Edited {item_id}")
        return updated

    async def delete(self, item_id: str) -> None:
        await self._repo.delete(item_id)
        logger.info(f"Deleted {item_id}")

    async def search(self, query: str) -> list[Item]:
        """Case-insensitive substring match on front or back."""
        needle = query.lower()
        return [
            item
            for item in await self._repo.load_all()
            if needle in item.front.lower() or needle in item.back.lower()
        ]
