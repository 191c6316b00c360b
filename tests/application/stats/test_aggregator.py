from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from cadence.application.stats.aggregator import StatsAggregator
from cadence.application.stats.service import StatsService
from cadence.domain.models import CardState
from cadence.domain.stats.models import StateBreakdown
from cadence.infrastructure.adapters.memory_store import InMemoryItemRepository

from conftest import T0, make_item


@pytest.fixture
def aggregator():
    return StatsAggregator()


def test_empty_collection(aggregator):
    stats = aggregator.compute([], T0)

    assert stats.total_cards == 0
    assert stats.due_today == 0
    assert stats.reviewed_today == 0
    assert stats.mastery_percentage == 0
    assert stats.current_streak == 0
    assert stats.states == StateBreakdown()


def test_counts_and_mastery(aggregator):
    items = [
        make_item("a", CardState.REVIEW, timedelta(days=2), interval=3),
        make_item("b", CardState.REVIEW, -timedelta(hours=1), interval=3),
        make_item("c", CardState.LEARNING, -timedelta(minutes=1), interval=1),
        make_item("d", CardState.NEW, timedelta(0)),
    ]

    stats = aggregator.compute(items, T0)

    assert stats.total_cards == 4
    assert stats.due_today == 3
    assert stats.mastery_percentage == 50
    assert stats.states == StateBreakdown(new=1, learning=1, review=2, relearning=0)
    assert stats.due_states == StateBreakdown(new=1, learning=1, review=1, relearning=0)


def test_mastery_is_rounded(aggregator):
    items = [make_item("r", CardState.REVIEW, timedelta(days=1), interval=1)] + [
        make_item(f"n{i}", CardState.NEW) for i in range(2)
    ]
    assert aggregator.compute(items, T0).mastery_percentage == 33


def test_reviewed_today_uses_last_reviewed_at(aggregator):
    items = [
        make_item(
            "today",
            CardState.REVIEW,
            timedelta(days=5),
            interval=5,
            review_count=3,
            last_reviewed_at=T0 - timedelta(hours=2),
        ),
        make_item(
            "yesterday",
            CardState.REVIEW,
            timedelta(days=5),
            interval=5,
            review_count=3,
            last_reviewed_at=T0 - timedelta(days=1),
        ),
    ]

    assert aggregator.compute(items, T0).reviewed_today == 1


def test_reviewed_today_falls_back_for_legacy_records(aggregator):
    items = [
        # graded earlier with a 10 minute relearning step, no timestamp recorded
        make_item(
            "legacy", CardState.RELEARNING, timedelta(minutes=10), interval=10, review_count=4
        ),
        # never reviewed, due today
        make_item("fresh", CardState.NEW, timedelta(hours=1)),
    ]

    assert aggregator.compute(items, T0).reviewed_today == 1


def test_future_items_are_not_due(aggregator):
    items = [make_item("later", CardState.REVIEW, timedelta(seconds=1), interval=1)]
    assert aggregator.compute(items, T0).due_today == 0


@pytest.mark.asyncio
async def test_service_loads_from_repository(clock):
    repo = InMemoryItemRepository(
        items=[
            make_item("a", CardState.REVIEW, -timedelta(days=1), interval=3),
            make_item("b", CardState.NEW),
        ]
    )
    stats = await StatsService(repo, clock=clock).compute_stats()

    assert stats.total_cards == 2
    assert stats.due_today == 2
    assert stats.mastery_percentage == 50


@pytest.mark.asyncio
async def test_service_explicit_now_overrides_clock(clock):
    repo = InMemoryItemRepository(
        items=[make_item("a", CardState.REVIEW, timedelta(days=1), interval=1)]
    )
    service = StatsService(repo, clock=clock)

    assert (await service.compute_stats()).due_today == 0
    assert (await service.compute_stats(now=T0 + timedelta(days=2))).due_today == 1


@pytest.mark.asyncio
async def test_service_delegates_to_aggregator(clock):
    repo = AsyncMock()
    repo.load_all.return_value = []
    aggregator = StatsAggregator()

    stats = await StatsService(repo, clock=clock, aggregator=aggregator).compute_stats()

    repo.load_all.assert_awaited_once()
    assert stats.total_cards == 0


@pytest.mark.asyncio
async def test_service_treats_naive_now_as_utc(clock):
    repo = InMemoryItemRepository(
        items=[
            make_item("due", CardState.REVIEW, -timedelta(hours=1), interval=1),
            make_item("later", CardState.REVIEW, timedelta(hours=1), interval=1),
        ]
    )
    naive_now = T0.replace(tzinfo=None)

    stats = await StatsService(repo, clock=clock).compute_stats(now=naive_now)

    assert stats.due_today == 1
    assert stats.total_cards == 2
