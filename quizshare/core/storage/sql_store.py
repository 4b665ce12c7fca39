"""SQLAlchemy-backed stores for a shared, structured database.

Column names follow the remote table layout (``quizzes`` and ``quiz_results``)
so the same database can be read by other clients. Questions and answers are
kept as JSON columns because they are only ever read together with their
parent row.
"""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, Text, create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from quizshare.constants.storage_constants import QUIZZES_TABLE, RESULTS_TABLE
from quizshare.core.errors import StorageError
from quizshare.core.models import Quiz, QuizResult
from quizshare.core.storage.records import question_from_record, question_to_record

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class QuizRow(Base):
    __tablename__ = QUIZZES_TABLE

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    questions: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class ResultRow(Base):
    __tablename__ = RESULTS_TABLE

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    # Weak reference: results outlive their quiz as orphaned rows.
    quiz_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    user_name: Mapped[str] = mapped_column(String(255), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    total_questions: Mapped[int] = mapped_column(Integer, nullable=False)
    time_elapsed: Mapped[int] = mapped_column(Integer, nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    answers: Mapped[list[int]] = mapped_column(JSON, nullable=False)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SqlDatabase:
    """Owns the engine and session factory shared by the SQL stores."""

    def __init__(self, database_url: str, echo: bool = False) -> None:
        engine_kwargs: dict[str, Any] = {"echo": echo}
        if database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if database_url in ("sqlite://", "sqlite:///:memory:"):
                engine_kwargs["poolclass"] = StaticPool
        self.engine = create_engine(database_url, **engine_kwargs)
        self.session_factory = sessionmaker(self.engine, expire_on_commit=False)

    def create_schema(self) -> None:
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not create tables: {exc}") from exc

    def session(self) -> Session:
        return self.session_factory()

    def dispose(self) -> None:
        self.engine.dispose()


class SqlQuizStore:
    def __init__(self, database: SqlDatabase) -> None:
        self._database = database

    def create(self, quiz: Quiz) -> Quiz:
        row = QuizRow(
            id=quiz.id,
            title=quiz.title,
            description=quiz.description,
            questions=[question_to_record(q) for q in quiz.questions],
            created_at=quiz.created_at,
        )
        try:
            with self._database.session() as session, session.begin():
                session.add(row)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to save quiz {quiz.id}.") from exc
        logger.debug("Inserted quiz %s", quiz.id)
        return quiz

    def get(self, quiz_id: str) -> Quiz | None:
        try:
            with self._database.session() as session:
                row = session.get(QuizRow, quiz_id)
                return self._to_model(row) if row is not None else None
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to load quiz {quiz_id}.") from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise StorageError(f"Malformed quiz row {quiz_id}: {exc}") from exc

    def list_all(self) -> list[Quiz]:
        try:
            with self._database.session() as session:
                rows = session.scalars(select(QuizRow)).all()
                return [self._to_model(row) for row in rows]
        except SQLAlchemyError as exc:
            raise StorageError("Failed to load quizzes.") from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise StorageError(f"Malformed quiz row: {exc}") from exc

    @staticmethod
    def _to_model(row: QuizRow) -> Quiz:
        return Quiz(
            id=row.id,
            title=row.title,
            description=row.description or "",
            questions=[question_from_record(q) for q in row.questions or []],
            created_at=_as_utc(row.created_at),
        )


class SqlResultStore:
    def __init__(self, database: SqlDatabase) -> None:
        self._database = database

    def create(self, result: QuizResult) -> QuizResult:
        row = ResultRow(
            id=result.id,
            quiz_id=result.quiz_id,
            user_name=result.user_name,
            score=result.score,
            total_questions=result.total_questions,
            time_elapsed=result.time_elapsed,
            submitted_at=result.submitted_at,
            answers=list(result.answers),
        )
        try:
            with self._database.session() as session, session.begin():
                session.add(row)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to save result {result.id}.") from exc
        logger.debug("Inserted result %s for quiz %s", result.id, result.quiz_id)
        return result

    def list_by_quiz_id(self, quiz_id: str) -> list[QuizResult]:
        return self._query(select(ResultRow).where(ResultRow.quiz_id == quiz_id))

    def list_all(self) -> list[QuizResult]:
        return self._query(select(ResultRow))

    def _query(self, statement) -> list[QuizResult]:
        try:
            with self._database.session() as session:
                return [self._to_model(row) for row in session.scalars(statement).all()]
        except SQLAlchemyError as exc:
            raise StorageError("Failed to load results.") from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise StorageError(f"Malformed result row: {exc}") from exc

    @staticmethod
    def _to_model(row: ResultRow) -> QuizResult:
        return QuizResult(
            id=row.id,
            quiz_id=row.quiz_id,
            user_name=row.user_name,
            answers=[int(a) for a in row.answers or []],
            score=row.score,
            total_questions=row.total_questions,
            time_elapsed=row.time_elapsed,
            submitted_at=_as_utc(row.submitted_at),
        )
