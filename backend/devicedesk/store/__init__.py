"""Entity store: one backend chosen at startup and shared by every route."""

import logging

from fastapi import Request

from ..config import Settings
from ..database import make_engine
from .base import Collection, EntityStore
from .local import LocalEntityStore, LocalStorage
from .remote import RemoteEntityStore

logger = logging.getLogger(__name__)

__all__ = [
    "Collection",
    "EntityStore",
    "LocalEntityStore",
    "LocalStorage",
    "RemoteEntityStore",
    "build_store",
    "get_store",
]


def build_store(settings: Settings, storage: LocalStorage) -> EntityStore:
    if settings.remote_configured:
        logger.info("Remote table store configured, using %s", settings.get_database_url().split("@")[-1])
        return RemoteEntityStore(make_engine(settings.get_database_url()))
    logger.warning("Remote table store not configured. Running in offline mode (local storage).")
    return LocalEntityStore(storage)


def get_store(request: Request) -> EntityStore:
    return request.app.state.store
