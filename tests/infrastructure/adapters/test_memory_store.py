from datetime import timedelta

import pytest

from cadence.domain.exceptions import ItemNotFound
from cadence.domain.models import LearningConfig
from cadence.infrastructure.adapters.memory_store import InMemoryItemRepository

from conftest import T0, make_item


@pytest.mark.asyncio
async def test_seeded_items_and_config():
    config = LearningConfig(learning_steps=(5,))
    repo = InMemoryItemRepository(items=[make_item("a"), make_item("b")], config=config)

    assert [i.id for i in await repo.load_all()] == ["a", "b"]
    assert await repo.load_config() == config


@pytest.mark.asyncio
async def test_defaults_when_empty():
    repo = InMemoryItemRepository()
    assert await repo.load_all() == []
    assert await repo.load_config() == LearningConfig()


@pytest.mark.asyncio
async def test_save_get_delete(repo):
    item = make_item("a")
    await repo.save(item)
    assert await repo.get("a") == item

    await repo.delete("a")
    with pytest.raises(ItemNotFound):
        await repo.get("a")
    with pytest.raises(ItemNotFound):
        await repo.delete("a")


@pytest.mark.asyncio
async def test_load_due_uses_inclusive_boundary(repo):
    await repo.save(make_item("now", due_in=timedelta(0)))
    await repo.save(make_item("soon", due_in=timedelta(seconds=1)))

    assert [i.id for i in await repo.load_due(T0)] == ["now"]


@pytest.mark.asyncio
async def test_save_config(repo):
    config = LearningConfig(easy_interval=9)
    await repo.save_config(config)
    assert await repo.load_config() == config
