"""Composition helpers that pick a storage backend from settings."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

from quizshare.config import Settings
from quizshare.constants.storage_constants import BACKEND_LOCAL, BACKEND_MEMORY, BACKEND_SQL
from quizshare.core.storage.base import QuizStore, ResultStore
from quizshare.core.storage.local_store import LocalQuizStore, LocalResultStore, LocalStorageFile
from quizshare.core.storage.memory_store import InMemoryQuizStore, InMemoryResultStore
from quizshare.core.storage.sql_store import SqlDatabase, SqlQuizStore, SqlResultStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Stores:
    quizzes: QuizStore
    results: ResultStore


def create_stores(settings: Settings) -> Stores:
    backend = settings.STORAGE_BACKEND
    if backend == BACKEND_MEMORY:
        logger.info("Using in-memory storage; data is lost on restart")
        return Stores(quizzes=InMemoryQuizStore(), results=InMemoryResultStore())
    if backend == BACKEND_LOCAL:
        storage = LocalStorageFile(Path(settings.LOCAL_STORAGE_PATH))
        logger.info("Using local storage file %s", storage.path)
        return Stores(quizzes=LocalQuizStore(storage), results=LocalResultStore(storage))
    if backend == BACKEND_SQL:
        database = SqlDatabase(settings.DATABASE_URL)
        database.create_schema()
        logger.info("Using SQL storage at %s", database.engine.url.render_as_string(hide_password=True))
        return Stores(quizzes=SqlQuizStore(database), results=SqlResultStore(database))
    raise ValueError(f"Unknown storage backend '{backend}'.")
