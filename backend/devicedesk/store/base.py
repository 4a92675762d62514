"""Backend-independent collection contract.

Reads never raise: a backend failure is logged and the caller sees an empty
collection. Writes always raise, wrapped in ``StoreWriteError`` so the route
that started the action can report which operation failed.
"""

import logging
from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

from ..errors import EntityNotFound, StoreWriteError
from .columns import ColumnMap

logger = logging.getLogger(__name__)

E = TypeVar("E")


class Collection(ABC, Generic[E]):
    def __init__(self, columns: ColumnMap):
        self.columns = columns

    @property
    def label(self) -> str:
        return self.columns.label

    def list(self) -> List[E]:
        """All records, newest first by creation time."""
        try:
            return self._fetch_all()
        except Exception:
            logger.exception("Error fetching %s list", self.columns.table)
            return []

    def get(self, entity_id: str) -> Optional[E]:
        return next((item for item in self.list() if item.id == entity_id), None)

    def require(self, entity_id: str, operation: str) -> E:
        """Look up a record ahead of a write; a read failure is reported as a failed write."""
        try:
            entities = self._fetch_all()
        except Exception as exc:
            logger.exception("%s failed reading %s", operation, self.columns.table)
            raise StoreWriteError(operation, exc.__class__.__name__) from exc
        for item in entities:
            if item.id == entity_id:
                return item
        raise EntityNotFound(self.label, entity_id)

    def add(self, entity: E) -> None:
        self._write(f"add {self.label}", self._insert, entity)

    def update(self, entity: E) -> None:
        self._write(f"update {self.label}", self._replace, entity)

    def delete(self, entity_id: str) -> None:
        self._write(f"delete {self.label}", self._remove, entity_id)

    def _write(self, operation: str, action, argument) -> None:
        try:
            action(argument)
        except (StoreWriteError, EntityNotFound):
            logger.warning("%s rejected for %s", operation, getattr(argument, "id", argument))
            raise
        except Exception as exc:
            logger.exception("%s failed", operation)
            raise StoreWriteError(operation, exc.__class__.__name__) from exc

    @abstractmethod
    def _fetch_all(self) -> List[E]:
        ...

    @abstractmethod
    def _insert(self, entity: E) -> None:
        ...

    @abstractmethod
    def _replace(self, entity: E) -> None:
        ...

    @abstractmethod
    def _remove(self, entity_id: str) -> None:
        ...


class EntityStore:
    """The four business collections behind one backend."""

    backend = "unknown"

    def __init__(self, organizations: Collection, customers: Collection, tickets: Collection, warranties: Collection):
        self.organizations = organizations
        self.customers = customers
        self.tickets = tickets
        self.warranties = warranties

    def collections(self):
        return (self.organizations, self.customers, self.tickets, self.warranties)

    def close(self) -> None:
        """Release backend resources; the default backend holds none."""
