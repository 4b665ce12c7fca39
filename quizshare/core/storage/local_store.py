"""File-backed key-value stores that mimic browser local storage.

One JSON document holds every key. Each key maps to a JSON array of records,
exactly like ``localStorage.setItem(key, JSON.stringify([...]))``. A create
reads the array, appends one record and replaces the whole file atomically.
"""

from __future__ import annotations

from collections.abc import Callable
import json
import logging
import os
from pathlib import Path
import tempfile
from threading import Lock
from typing import Any, TypeVar

from quizshare.constants.storage_constants import LOCAL_QUIZZES_KEY, LOCAL_RESULTS_KEY
from quizshare.core.errors import StorageError
from quizshare.core.models import Quiz, QuizResult
from quizshare.core.storage.records import (
    quiz_from_local_record,
    quiz_to_local_record,
    result_from_local_record,
    result_to_local_record,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LocalStorageFile:
    """A JSON document of string keys shared by the local stores."""

    def __init__(self, file_path: Path) -> None:
        self._path = Path(file_path)
        self._lock = Lock()

    @property
    def path(self) -> Path:
        return self._path

    def get_item(self, key: str) -> list[dict[str, Any]]:
        with self._lock:
            return self._records(self._read_document(), key)

    def append_item(self, key: str, record: dict[str, Any]) -> None:
        with self._lock:
            document = self._read_document()
            document[key] = [*self._records(document, key), record]
            self._write_document(document)

    def _records(self, document: dict[str, Any], key: str) -> list[dict[str, Any]]:
        records = document.get(key, [])
        if not isinstance(records, list):
            raise StorageError(f"Local storage key '{key}' in {self._path} must hold a list.")
        return records

    def _read_document(self) -> dict[str, list[dict[str, Any]]]:
        if not self._path.exists():
            return {}
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Could not read {self._path}: {exc}") from exc
        if not raw.strip():
            return {}
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Local storage file {self._path} is corrupt.") from exc
        if not isinstance(document, dict):
            raise StorageError(f"Local storage file {self._path} must contain an object.")
        return document

    def _write_document(self, document: dict[str, list[dict[str, Any]]]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(document, handle, ensure_ascii=False, indent=2)
                os.replace(temp_name, self._path)
            except BaseException:
                Path(temp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"Could not write {self._path}: {exc}") from exc


def _decode_all(
    records: list[dict[str, Any]], decoder: Callable[[dict[str, Any]], T], key: str
) -> list[T]:
    try:
        return [decoder(record) for record in records]
    except (KeyError, TypeError, ValueError) as exc:
        raise StorageError(f"Malformed record under '{key}': {exc}") from exc


class LocalQuizStore:
    def __init__(self, storage: LocalStorageFile, key: str = LOCAL_QUIZZES_KEY) -> None:
        self._storage = storage
        self._key = key

    def create(self, quiz: Quiz) -> Quiz:
        self._storage.append_item(self._key, quiz_to_local_record(quiz))
        logger.debug("Stored quiz %s in %s", quiz.id, self._storage.path)
        return quiz

    def get(self, quiz_id: str) -> Quiz | None:
        return next((q for q in self.list_all() if q.id == quiz_id), None)

    def list_all(self) -> list[Quiz]:
        records = self._storage.get_item(self._key)
        return _decode_all(records, quiz_from_local_record, self._key)


class LocalResultStore:
    def __init__(self, storage: LocalStorageFile, key: str = LOCAL_RESULTS_KEY) -> None:
        self._storage = storage
        self._key = key

    def create(self, result: QuizResult) -> QuizResult:
        self._storage.append_item(self._key, result_to_local_record(result))
        logger.debug("Stored result %s for quiz %s", result.id, result.quiz_id)
        return result

    def list_by_quiz_id(self, quiz_id: str) -> list[QuizResult]:
        return [r for r in self.list_all() if r.quiz_id == quiz_id]

    def list_all(self) -> list[QuizResult]:
        records = self._storage.get_item(self._key)
        return _decode_all(records, result_from_local_record, self._key)
