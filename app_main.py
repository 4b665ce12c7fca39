"""Application entry point for the QuizShare service."""

from __future__ import annotations

from fastapi import FastAPI

from quizshare.config import Settings, get_settings
from quizshare.core.qr_codes import create_qr_encoder
from quizshare.core.quiz_manager import QuizManager
from quizshare.core.storage.factory import create_stores
from quizshare.server.api_server import create_api_app, run_api_server
from quizshare.utils.logging_config import configure_logging


def build_app(settings: Settings) -> FastAPI:
    """Wire the configured stores and QR strategy into a FastAPI app."""
    stores = create_stores(settings)
    quiz_manager = QuizManager(
        quiz_store=stores.quizzes,
        result_store=stores.results,
        qr_encoder=create_qr_encoder(settings.QR_STRATEGY),
    )
    return create_api_app(quiz_manager, public_origin=settings.PUBLIC_ORIGIN)


def main() -> None:
    """Initialize logging, build the app from settings and serve it."""
    settings = get_settings()
    logger = configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    logger.info("Starting %s %s…", settings.APP_NAME, settings.VERSION)
    logger.info(
        "Storage backend: %s, QR strategy: %s",
        settings.STORAGE_BACKEND,
        settings.QR_STRATEGY,
    )

    app = build_app(settings)
    run_api_server(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL)


if __name__ == "__main__":
    main()
