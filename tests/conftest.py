from datetime import datetime, timedelta, timezone

import pytest

from cadence.domain.clock import FixedClock
from cadence.domain.models import CardState, Item, LearningConfig
from cadence.infrastructure.adapters.memory_store import InMemoryItemRepository

T0 = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


def make_item(
    item_id: str = "item_1",
    state: CardState = CardState.NEW,
    due_in: timedelta = timedelta(0),
    now: datetime = T0,
    **kwargs,
) -> Item:
    """Build an item whose next review is `due_in` from `now` (negative = overdue)."""
    fields = {
        "front": f"front {item_id}",
        "back": f"back {item_id}",
        "created_at": now - timedelta(days=30),
    }
    fields.update(kwargs)
    return Item(id=item_id, state=state, next_review_date=now + due_in, **fields)


@pytest.fixture
def now():
    return T0


@pytest.fixture
def clock():
    return FixedClock(T0)


@pytest.fixture
def config():
    return LearningConfig()


@pytest.fixture
def repo(config):
    return InMemoryItemRepository(config=config)


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config/logs
    monkeypatch.setenv("HOME", str(home))
    return home
