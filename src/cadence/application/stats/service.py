"""
Stats Service: application layer orchestrator.

Loads the collection from the repository and hands it to the aggregator.
"""

import logging
from datetime import datetime

from cadence.domain.clock import Clock, SystemClock, ensure_aware
from cadence.domain.interfaces import ItemRepository
from cadence.domain.stats.models import StudyStats

from .aggregator import StatsAggregator

logger = logging.getLogger(__name__)


class StatsService:
    """
    Application service for collection statistics.

    Depends on the ItemRepository abstraction, not a concrete adapter.
    """

    def __init__(
        self,
        repo: ItemRepository,
        clock: Clock | None = None,
        aggregator: StatsAggregator | None = None,
    ):
        self._repo = repo
        self._clock = clock or SystemClock()
        self._agg = aggregator or StatsAggregator()

    async def compute_stats(self, now: datetime | None = None) -> StudyStats:
        """
        Compute stats for the whole collection at `now` (the clock's time if omitted).
        A naive `now` is taken to be UTC.
        """
        now = ensure_aware(now) if now is not None else self._clock.now()
        items = await self._repo.load_all()
        stats = self._agg.compute(items, now)
        logger.debug(
            f"Stats: total={stats.total_cards} due={stats.due_today} "
            f"reviewed_today={stats.reviewed_today} mastery={stats.mastery_percentage}%"
        )
        return stats
