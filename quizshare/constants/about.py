"""Static metadata describing QuizShare."""

APP_NAME = "QuizShare"
APP_VERSION = "0.2"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "QuizShare is a small quiz service built with FastAPI. "
    "Authors create multiple-choice quizzes, share them with a link or QR code, "
    "and review a leaderboard of everyone who took them."
)
