"""
Local fallback store (offline mode).

- LocalStorage: a durable string key-value file, the server-side stand-in for
  browser local storage. Every key holds a JSON string.
- LocalCollection: one JSON array per collection under a namespaced key,
  records serialized with camelCase keys.
- LocalEntityStore: wires the four collections together and enforces the same
  references the remote tables enforce with foreign keys.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import EntityNotFound, IntegrityViolation
from .base import Collection, EntityStore
from .columns import CUSTOMERS, LOCAL, ORGANIZATIONS, TICKETS, WARRANTIES, ColumnMap

logger = logging.getLogger(__name__)


class LocalStorage:
    """
    String key-value storage persisted as one JSON object on disk.

    A missing or unreadable file starts empty. With ``path=None`` the data
    only lives in memory (used by tests).
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = path
        self._lock = threading.Lock()
        self._items: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError):
            logger.exception("Could not read local storage at %s, starting empty", self.path)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(key): value for key, value in data.items() if isinstance(value, str)}

    def _save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._items, f, ensure_ascii=False, indent=2)

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value
            self._save()

    def remove_item(self, key: str) -> None:
        with self._lock:
            if self._items.pop(key, None) is not None:
                self._save()


class LocalCollection(Collection):
    def __init__(self, columns: ColumnMap, storage: LocalStorage, owner: "LocalEntityStore"):
        super().__init__(columns)
        self.storage = storage
        self.owner = owner

    def _rows(self) -> List[dict]:
        raw = self.storage.get_item(self.columns.local_key)
        if not raw:
            return []
        rows = json.loads(raw)
        if not isinstance(rows, list):
            raise ValueError(f"{self.columns.local_key} does not hold a JSON array")
        return rows

    def _store_rows(self, rows: List[dict]) -> None:
        self.storage.set_item(self.columns.local_key, json.dumps(rows, ensure_ascii=False))

    def _fetch_all(self) -> List:
        entities = [self.columns.decode(row) for row in self._rows()]
        entities.sort(key=lambda item: item.created_at, reverse=True)
        return entities

    def _insert(self, entity) -> None:
        operation = f"add {self.label}"
        with self.owner.lock:
            rows = self._rows()
            if any(row.get("id") == entity.id for row in rows):
                raise IntegrityViolation(operation, f"duplicate id {entity.id}")
            self.owner.check_parents(self.columns, entity, operation)
            self._store_rows([self.columns.encode(entity, LOCAL)] + rows)

    def _replace(self, entity) -> None:
        with self.owner.lock:
            rows = self._rows()
            for index, row in enumerate(rows):
                if row.get("id") == entity.id:
                    break
            else:
                raise EntityNotFound(self.label, entity.id)
            self.owner.check_parents(self.columns, entity, f"update {self.label}")
            existing = self.columns.decode(rows[index])
            replacement = entity.model_copy(update={"created_at": existing.created_at})
            rows[index] = self.columns.encode(replacement, LOCAL)
            self._store_rows(rows)

    def _remove(self, entity_id: str) -> None:
        with self.owner.lock:
            rows = self._rows()
            remaining = [row for row in rows if row.get("id") != entity_id]
            if len(remaining) == len(rows):
                raise EntityNotFound(self.label, entity_id)
            self.owner.check_children(self.columns, entity_id, f"delete {self.label}")
            self._store_rows(remaining)


class LocalEntityStore(EntityStore):
    backend = "local"

    def __init__(self, storage: LocalStorage):
        self.storage = storage
        # Held across each read, reference check and write of any collection.
        self.lock = threading.RLock()
        super().__init__(
            organizations=LocalCollection(ORGANIZATIONS, storage, self),
            customers=LocalCollection(CUSTOMERS, storage, self),
            tickets=LocalCollection(TICKETS, storage, self),
            warranties=LocalCollection(WARRANTIES, storage, self),
        )
        self._by_table = {collection.columns.table: collection for collection in self.collections()}

    def check_parents(self, columns: ColumnMap, entity, operation: str) -> None:
        with self.lock:
            for field_name, table in columns.references.items():
                parent_id = getattr(entity, field_name)
                parent = self._by_table[table]
                if not any(item.id == parent_id for item in parent._fetch_all()):
                    raise IntegrityViolation(operation, f"{parent.label} {parent_id} does not exist")

    def check_children(self, columns: ColumnMap, entity_id: str, operation: str) -> None:
        with self.lock:
            for child in self.collections():
                for field_name, table in child.columns.references.items():
                    if table != columns.table:
                        continue
                    if any(getattr(item, field_name) == entity_id for item in child._fetch_all()):
                        raise IntegrityViolation(operation, f"still referenced by a {child.label}")
