"""FastAPI server exposing quiz authoring, taking and results endpoints."""

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel
import uvicorn

from quizshare.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION
from quizshare.constants.network_constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    SHARE_QUERY_PARAMETER,
)
from quizshare.core.errors import (
    AttemptNotFoundError,
    AttemptStateError,
    QuizNotFoundError,
    QuizValidationError,
    StorageError,
)
from quizshare.core.markdown_math_renderer import renderer
from quizshare.core.models import QuestionDraft, Quiz, QuizDraft, QuizResult
from quizshare.core.quiz_manager import QuizManager
from quizshare.core.services.attempt_session import AttemptSession
from quizshare.core.services.leaderboard import Leaderboard
from quizshare.core.storage.records import format_timestamp

logger = logging.getLogger(__name__)


class QuestionPayload(BaseModel):
    """Payload schema for one question of a new quiz."""

    text: str
    options: list[str]
    correct_option_index: int = 0
    id: str | None = None


class QuizPayload(BaseModel):
    """Payload schema for the quiz creator."""

    title: str
    description: str | None = None
    questions: list[QuestionPayload] = []


class StartAttemptPayload(BaseModel):
    """Payload schema for starting an attempt."""

    user_name: str


class AnswerPayload(BaseModel):
    """Payload schema for a selected option."""

    selected_option_index: int


def _questions_for_author(quiz: Quiz) -> list[dict[str, object]]:
    return [
        {
            "id": question.id,
            "text": question.text,
            "options": list(question.options),
            "correct_option_index": question.correct_option_index,
        }
        for question in quiz.questions
    ]


def _quiz_for_author(quiz: Quiz) -> dict[str, object]:
    return {
        "id": quiz.id,
        "title": quiz.title,
        "description": quiz.description,
        "created_at": format_timestamp(quiz.created_at),
        "question_count": quiz.question_count,
        "questions": _questions_for_author(quiz),
    }


def _quiz_for_taker(quiz: Quiz) -> dict[str, object]:
    # Correct answers are withheld from respondents.
    return {
        "id": quiz.id,
        "title": quiz.title,
        "description": quiz.description,
        "description_html": renderer.render_fragment(quiz.description),
        "created_at": format_timestamp(quiz.created_at),
        "question_count": quiz.question_count,
        "questions": [
            {
                "id": question.id,
                "text": question.text,
                "question_html": renderer.render_fragment(question.text),
                "options": list(question.options),
            }
            for question in quiz.questions
        ],
    }


def _result_payload(result: QuizResult) -> dict[str, object]:
    return {
        "id": result.id,
        "quiz_id": result.quiz_id,
        "user_name": result.user_name,
        "score": result.score,
        "total_questions": result.total_questions,
        "time_elapsed": result.time_elapsed,
        "submitted_at": format_timestamp(result.submitted_at),
        "answers": list(result.answers),
    }


def _attempt_payload(attempt: AttemptSession) -> dict[str, object]:
    return {
        "attempt_id": attempt.id,
        "quiz_id": attempt.quiz.id,
        "user_name": attempt.user_name,
        "started_at": format_timestamp(attempt.started_at),
        "current_question_index": attempt.current_index,
        "question_count": attempt.quiz.question_count,
        "answers": attempt.get_answers(),
        "answered_count": attempt.answered_count(),
        "elapsed_seconds": attempt.elapsed_seconds,
    }


def _leaderboard_payload(quiz: Quiz, leaderboard: Leaderboard) -> dict[str, object]:
    stats = leaderboard.get_stats()
    return {
        "quiz_id": quiz.id,
        "title": quiz.title,
        "total_questions": leaderboard.total_questions,
        "stats": {
            "participant_count": stats.participant_count,
            "average_score_percent": stats.average_score_percent,
            "average_time_seconds": stats.average_time_seconds,
            "best_score": stats.best_score,
        },
        "rows": [
            {
                "rank": row.rank,
                "percentage": row.percentage,
                "badge": row.badge,
                **_result_payload(row.result),
            }
            for row in leaderboard.get_rows()
        ],
    }


def _draft_from_payload(payload: QuizPayload) -> QuizDraft:
    return QuizDraft(
        title=payload.title,
        description=payload.description,
        questions=[
            QuestionDraft(
                text=question.text,
                options=list(question.options),
                correct_option_index=question.correct_option_index,
                id=question.id,
            )
            for question in payload.questions
        ],
    )


def _get_quiz_manager_dependency(quiz_manager: QuizManager):
    def dependency() -> QuizManager:
        return quiz_manager

    return dependency


def _register_error_handlers(app: FastAPI) -> None:
    def _error(status_code: int, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    @app.exception_handler(QuizValidationError)
    async def handle_validation_error(request: Request, exc: QuizValidationError) -> JSONResponse:
        return _error(422, exc)

    @app.exception_handler(QuizNotFoundError)
    async def handle_quiz_not_found(request: Request, exc: QuizNotFoundError) -> JSONResponse:
        return _error(404, exc)

    @app.exception_handler(AttemptNotFoundError)
    async def handle_attempt_not_found(request: Request, exc: AttemptNotFoundError) -> JSONResponse:
        return _error(404, exc)

    @app.exception_handler(AttemptStateError)
    async def handle_attempt_state(request: Request, exc: AttemptStateError) -> JSONResponse:
        return _error(409, exc)

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError) -> JSONResponse:
        logger.warning("Storage failure on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=503,
            content={"detail": "Storage is unavailable, please try again later."},
        )


def create_api_app(quiz_manager: QuizManager, public_origin: str | None = None) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    quiz_manager_dep = _get_quiz_manager_dependency(quiz_manager)
    _register_error_handlers(app)

    def _origin(request: Request) -> str:
        return public_origin or str(request.base_url).rstrip("/")

    @app.get("/")
    def resolve_share_link(
        request: Request,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        if SHARE_QUERY_PARAMETER not in request.query_params:
            return {
                "name": APP_NAME,
                "version": APP_VERSION,
                "license": APP_LICENSE,
                "about": APP_ABOUT_TEXT,
                "quizzes_url": "/quizzes",
            }
        quiz = manager.resolve_share_url(str(request.url))
        return _quiz_for_taker(quiz)

    @app.post("/quizzes", status_code=201)
    def create_quiz(
        payload: QuizPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        quiz = manager.create_quiz(_draft_from_payload(payload))
        return _quiz_for_author(quiz)

    @app.get("/quizzes")
    def list_quizzes(manager: QuizManager = Depends(quiz_manager_dep)) -> list[dict[str, object]]:
        return [
            {
                "id": summary.quiz.id,
                "title": summary.quiz.title,
                "description": summary.quiz.description,
                "created_at": format_timestamp(summary.quiz.created_at),
                "question_count": summary.quiz.question_count,
                "participant_count": summary.participant_count,
                "average_score_percent": summary.average_score_percent,
                "recent_participants": [
                    {"user_name": r.user_name, "score": r.score}
                    for r in summary.recent_participants
                ],
            }
            for summary in manager.list_quiz_summaries()
        ]

    @app.get("/quizzes/{quiz_id}")
    def get_quiz(quiz_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        return _quiz_for_taker(manager.get_quiz(quiz_id))

    @app.get("/quizzes/{quiz_id}/share")
    def get_share_code(
        quiz_id: str,
        request: Request,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        share = manager.get_share_code(quiz_id, _origin(request))
        return {"url": share.url, "strategy": share.strategy, "modules": share.modules}

    @app.get("/quizzes/{quiz_id}/qr.svg")
    def get_share_svg(
        quiz_id: str,
        request: Request,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> Response:
        svg = manager.render_share_svg(quiz_id, _origin(request))
        if svg is None:
            raise HTTPException(status_code=404, detail="No QR image for the configured strategy.")
        return Response(content=svg, media_type="image/svg+xml")

    @app.get("/quizzes/{quiz_id}/results")
    def get_results(quiz_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        quiz, leaderboard = manager.get_leaderboard(quiz_id)
        return _leaderboard_payload(quiz, leaderboard)

    @app.post("/quizzes/{quiz_id}/attempts", status_code=201)
    def start_attempt(
        quiz_id: str,
        payload: StartAttemptPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        return _attempt_payload(manager.start_attempt(quiz_id, payload.user_name))

    @app.get("/attempts/{attempt_id}")
    def get_attempt(attempt_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        return _attempt_payload(manager.get_attempt(attempt_id))

    @app.put("/attempts/{attempt_id}/answers/{question_index}")
    def select_answer(
        attempt_id: str,
        question_index: int,
        payload: AnswerPayload,
        manager: QuizManager = Depends(quiz_manager_dep),
    ) -> dict[str, object]:
        attempt = manager.select_answer(attempt_id, question_index, payload.selected_option_index)
        return _attempt_payload(attempt)

    @app.post("/attempts/{attempt_id}/next")
    def next_question(attempt_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        return _attempt_payload(manager.move_to_next_question(attempt_id))

    @app.post("/attempts/{attempt_id}/previous")
    def previous_question(attempt_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        return _attempt_payload(manager.move_to_previous_question(attempt_id))

    @app.post("/attempts/{attempt_id}/submit", status_code=201)
    def submit_attempt(attempt_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> dict[str, object]:
        return _result_payload(manager.submit_attempt(attempt_id))

    @app.delete("/attempts/{attempt_id}", status_code=204)
    def abandon_attempt(attempt_id: str, manager: QuizManager = Depends(quiz_manager_dep)) -> Response:
        manager.abandon_attempt(attempt_id)
        return Response(status_code=204)

    return app


def run_api_server(
    app: FastAPI,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    log_level: str = "info",
) -> None:
    """Serve the application in the foreground until interrupted."""
    config = uvicorn.Config(app=app, host=host, port=port, log_level=log_level.lower())
    uvicorn.Server(config).run()
