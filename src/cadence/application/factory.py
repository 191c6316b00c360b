"""
Repository Factory
Centralizes the logic for selecting the item store.
"""

import logging

from cadence.application.config import AppConfig
from cadence.domain.interfaces import ItemRepository
from cadence.infrastructure.adapters.json_store import JsonItemRepository
from cadence.infrastructure.adapters.memory_store import InMemoryItemRepository

logger = logging.getLogger(__name__)


def get_item_repository(config: AppConfig) -> ItemRepository:
    """
    Returns the ItemRepository implementation selected by config.
    """
    if config.backend == "memory":
        logger.debug("Backend: memory")
        return InMemoryItemRepository()

    logger.debug(f"Backend: json ({config.store_path})")
    return JsonItemRepository(config.store_path)
