"""
JSON Item Repository: infrastructure adapter for a single-file collection.

The whole collection (items + learning config) lives in one JSON document.
Writes go to a temporary file in the same directory which then replaces the
original, so a crash mid-write never leaves a truncated collection behind.
"""

import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from cadence.domain.exceptions import InvalidConfig, ItemNotFound, StorageError
from cadence.domain.interfaces import ItemRepository
from cadence.domain.models import Item, LearningConfig
from cadence.infrastructure.records import ItemRecord, LearningConfigRecord, StoreDocument

logger = logging.getLogger(__name__)


class JsonItemRepository(ItemRepository):
    """
    Reads the document on every call and rewrites it on every mutation.

    Collections are small (thousands of items), so there is no cache to keep
    coherent with edits made by another process.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    async def load_all(self) -> list[Item]:
        return [record.to_item() for record in self._read().items]

    async def get(self, item_id: str) -> Item:
        for record in self._read().items:
            if record.id == item_id:
                return record.to_item()
        raise ItemNotFound(item_id)

    async def save(self, item: Item) -> None:
        doc = self._read()
        record = ItemRecord.from_item(item)
        for i, existing in enumerate(doc.items):
            if existing.id == item.id:
                doc.items[i] = record
                break
        else:
            doc.items.append(record)
        self._write(doc)

    async def delete(self, item_id: str) -> None:
        doc = self._read()
        kept = [record for record in doc.items if record.id != item_id]
        if len(kept) == len(doc.items):
            raise ItemNotFound(item_id)
        doc.items = kept
        self._write(doc)

    # ------------------------------------------------------------------
    # Config
    # ------------------------------------------------------------------

    async def load_config(self) -> LearningConfig:
        raw = self._read().config
        if raw is None:
            return LearningConfig()
        try:
            return LearningConfigRecord.model_validate(raw).to_config()
        except (ValidationError, InvalidConfig) as e:
            logger.warning(f"Stored learning config is invalid, using defaults: {e}")
            return LearningConfig()

    async def save_config(self, config: LearningConfig) -> None:
        doc = self._read()
        doc.config = LearningConfigRecord.from_config(config).model_dump()
        self._write(doc)

    # ------------------------------------------------------------------
    # File I/O
    # ------------------------------------------------------------------

    def _read(self) -> StoreDocument:
        if not self.path.exists():
            return StoreDocument()
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e
        if not text.strip():
            return StoreDocument()
        try:
            return StoreDocument.model_validate_json(text)
        except ValidationError as e:
            raise StorageError(f"Corrupt collection file {self.path}: {e}") from e

    def _write(self, doc: StoreDocument) -> None:
        payload = doc.model_dump_json(indent=2)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Could not write {self.path}: {e}") from e
