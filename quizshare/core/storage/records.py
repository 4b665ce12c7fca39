"""Conversion between domain models and persisted record shapes.

The local store keeps the camelCase keys used by the browser local-storage
layout. The SQL store keeps snake_case columns but shares the question shape.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from quizshare.core.models import Question, Quiz, QuizResult


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def parse_timestamp(raw: str) -> datetime:
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def question_to_record(question: Question) -> dict[str, Any]:
    return {
        "id": question.id,
        "question": question.text,
        "options": list(question.options),
        "correctAnswer": question.correct_option_index,
    }


def question_from_record(record: dict[str, Any]) -> Question:
    return Question(
        id=str(record["id"]),
        text=record["question"],
        options=list(record["options"]),
        correct_option_index=int(record["correctAnswer"]),
    )


def quiz_to_local_record(quiz: Quiz) -> dict[str, Any]:
    return {
        "id": quiz.id,
        "title": quiz.title,
        "description": quiz.description,
        "questions": [question_to_record(q) for q in quiz.questions],
        "createdAt": format_timestamp(quiz.created_at),
    }


def quiz_from_local_record(record: dict[str, Any]) -> Quiz:
    return Quiz(
        id=str(record["id"]),
        title=record["title"],
        description=record.get("description") or "",
        questions=[question_from_record(q) for q in record.get("questions") or []],
        created_at=parse_timestamp(record["createdAt"]),
    )


def result_to_local_record(result: QuizResult) -> dict[str, Any]:
    return {
        "id": result.id,
        "quizId": result.quiz_id,
        "userName": result.user_name,
        "score": result.score,
        "totalQuestions": result.total_questions,
        "timeElapsed": result.time_elapsed,
        "submittedAt": format_timestamp(result.submitted_at),
        "answers": list(result.answers),
    }


def result_from_local_record(record: dict[str, Any]) -> QuizResult:
    return QuizResult(
        id=str(record["id"]),
        quiz_id=str(record["quizId"]),
        user_name=record["userName"],
        answers=[int(a) for a in record.get("answers") or []],
        score=int(record["score"]),
        total_questions=int(record["totalQuestions"]),
        time_elapsed=int(record["timeElapsed"]),
        submitted_at=parse_timestamp(record["submittedAt"]),
    )
