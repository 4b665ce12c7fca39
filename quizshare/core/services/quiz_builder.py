"""Service that validates quiz drafts and turns them into publishable quizzes."""

from __future__ import annotations

from collections.abc import Callable
from uuid import uuid4

from quizshare.constants.quiz_constants import OPTIONS_PER_QUESTION
from quizshare.core.errors import QuizValidationError
from quizshare.core.models import Question, QuestionDraft, Quiz, QuizDraft, utc_now


def _new_id() -> str:
    return uuid4().hex


class QuizBuilder:
    """Validates and normalizes author input. Performs no I/O."""

    def __init__(self, id_factory: Callable[[], str] = _new_id) -> None:
        self._id_factory = id_factory

    def build(self, draft: QuizDraft) -> Quiz:
        title = (draft.title or "").strip()
        if not title:
            raise QuizValidationError("Please enter a quiz title.")
        if not draft.questions:
            raise QuizValidationError("Please add at least one question.")

        quiz_id = self._id_factory()
        questions = [
            self._prepare_question(index, question)
            for index, question in enumerate(draft.questions)
        ]
        seen_ids: set[str] = set()
        for question in questions:
            if question.id in seen_ids:
                raise QuizValidationError(f"Duplicate question id '{question.id}'.")
            seen_ids.add(question.id)

        return Quiz(
            id=quiz_id,
            title=title,
            description=(draft.description or "").strip(),
            questions=questions,
            created_at=utc_now(),
        )

    def _prepare_question(self, index: int, draft: QuestionDraft) -> Question:
        position = index + 1
        cleaned_text = (draft.text or "").strip()
        if not cleaned_text:
            raise QuizValidationError(f"Question {position} must have text.")

        options = self._validate_options(position, draft.options)
        correct_index = draft.correct_option_index
        if isinstance(correct_index, bool) or not isinstance(correct_index, int):
            raise QuizValidationError(f"Question {position} has a non-integer correct option.")
        if not 0 <= correct_index < len(options):
            raise QuizValidationError(
                f"Question {position} correct option must be between 0 and {len(options) - 1}."
            )

        question_id = (draft.id or "").strip() or self._id_factory()
        return Question(
            id=question_id,
            text=cleaned_text,
            options=options,
            correct_option_index=correct_index,
        )

    @staticmethod
    def _validate_options(position: int, options: list[str]) -> list[str]:
        if len(options) != OPTIONS_PER_QUESTION:
            raise QuizValidationError(
                f"Question {position} must have exactly {OPTIONS_PER_QUESTION} options."
            )
        cleaned = [(option or "").strip() for option in options]
        if any(not option for option in cleaned):
            raise QuizValidationError("All answer options must be filled.")
        return cleaned
