"""Entity store backed by the remote relational tables."""

from typing import List, Type

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from .. import models
from ..database import Base, make_session_factory
from ..errors import EntityNotFound, IntegrityViolation
from .base import Collection, EntityStore
from .columns import CUSTOMERS, ORGANIZATIONS, REMOTE, TICKETS, WARRANTIES, ColumnMap

IMMUTABLE_COLUMNS = {"id", "created_at"}


class TableCollection(Collection):
    def __init__(self, columns: ColumnMap, model: Type, session_factory: sessionmaker):
        super().__init__(columns)
        self.model = model
        self.session_factory = session_factory

    def _fetch_all(self) -> List:
        table = self.model.__table__
        with self.session_factory() as db:
            rows = db.execute(select(table).order_by(table.c.created_at.desc())).mappings().all()
        return [self.columns.decode(row) for row in rows]

    def _insert(self, entity) -> None:
        record = self.model(**self.columns.encode(entity, REMOTE))
        with self.session_factory() as db:
            db.add(record)
            self._commit(db, f"add {self.label}")

    def _replace(self, entity) -> None:
        with self.session_factory() as db:
            record = db.get(self.model, entity.id)
            if record is None:
                raise EntityNotFound(self.label, entity.id)
            for column, value in self.columns.encode(entity, REMOTE).items():
                if column not in IMMUTABLE_COLUMNS:
                    setattr(record, column, value)
            db.add(record)
            self._commit(db, f"update {self.label}")

    def _remove(self, entity_id: str) -> None:
        with self.session_factory() as db:
            record = db.get(self.model, entity_id)
            if record is None:
                raise EntityNotFound(self.label, entity_id)
            db.delete(record)
            self._commit(db, f"delete {self.label}")

    @staticmethod
    def _commit(db, operation: str) -> None:
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise IntegrityViolation(operation, "record is referenced or references a missing record") from exc


class RemoteEntityStore(EntityStore):
    backend = "remote"

    def __init__(self, engine: Engine):
        self.engine = engine
        Base.metadata.create_all(bind=engine)
        factory = make_session_factory(engine)
        super().__init__(
            organizations=TableCollection(ORGANIZATIONS, models.Organization, factory),
            customers=TableCollection(CUSTOMERS, models.Customer, factory),
            tickets=TableCollection(TICKETS, models.RepairTicket, factory),
            warranties=TableCollection(WARRANTIES, models.WarrantyTicket, factory),
        )

    def close(self) -> None:
        self.engine.dispose()
