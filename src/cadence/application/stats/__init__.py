# Application Stats Package
from .aggregator import StatsAggregator
from .service import StatsService

__all__ = ["StatsAggregator", "StatsService"]
