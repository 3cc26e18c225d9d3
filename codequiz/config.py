"""Application configuration and constants."""
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _parse_int_env(name: str, default: int) -> int:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Database
DB_DIR = Path(os.environ.get("DB_DIR", Path.cwd() / "data"))
DB_DIR.mkdir(parents=True, exist_ok=True)
DATABASE_URL = os.environ.get(
    "DATABASE_URL", f"sqlite:///{DB_DIR / 'codequiz.db'}"
)

# Authentication
SECRET_KEY = os.environ.get(
    "SECRET_KEY",
    "CHANGE_ME_IN_PRODUCTION_USE_openssl_rand_hex_32"
)
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = _parse_int_env("ACCESS_TOKEN_EXPIRE_MINUTES", 60)
SESSION_EXTEND_MINUTES = _parse_int_env("SESSION_EXTEND_MINUTES", 60)

# Generative AI
OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY", "")
OPENAI_MODEL = os.environ.get("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_TIMEOUT_SECONDS = _parse_int_env("OPENAI_TIMEOUT_SECONDS", 60)

# Quizzes
QUIZ_DEFAULT_QUESTION_COUNT = _parse_int_env("QUIZ_DEFAULT_QUESTION_COUNT", 5)
QUIZ_MAX_QUESTION_COUNT = _parse_int_env("QUIZ_MAX_QUESTION_COUNT", 20)
QUIZ_DEFAULT_DIFFICULTY = "Medium"

# In-memory quiz sessions
SESSION_IDLE_MINUTES = _parse_int_env("SESSION_IDLE_MINUTES", 120)
SESSION_CLEANUP_INTERVAL_SECONDS = _parse_int_env(
    "SESSION_CLEANUP_INTERVAL_SECONDS", 10 * 60
)
