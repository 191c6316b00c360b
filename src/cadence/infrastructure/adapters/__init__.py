from .json_store import JsonItemRepository
from .memory_store import InMemoryItemRepository

__all__ = ["InMemoryItemRepository", "JsonItemRepository"]
