"""Storage backend names and default locations."""

BACKEND_MEMORY: str = "memory"
BACKEND_LOCAL: str = "local"
BACKEND_SQL: str = "sql"

DEFAULT_LOCAL_STORAGE_PATH: str = "data/local_storage.json"
DEFAULT_DATABASE_URL: str = "sqlite:///./quizshare.db"

# Key names mirror the browser local-storage layout.
LOCAL_QUIZZES_KEY: str = "quizzes"
LOCAL_RESULTS_KEY: str = "quizResults"

QUIZZES_TABLE: str = "quizzes"
RESULTS_TABLE: str = "quiz_results"

QR_STRATEGY_SCANNABLE: str = "scannable"
QR_STRATEGY_PLACEHOLDER: str = "placeholder"
PLACEHOLDER_GRID_SIZE: int = 20
