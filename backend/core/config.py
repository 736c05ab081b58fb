import os
from pathlib import Path
from dotenv import load_dotenv

from neuropath.scoring.models import DifficultyConfig

_BACKEND_ROOT = Path(__file__).resolve().parents[1]
_BACKEND_ENV_PATH = _BACKEND_ROOT / ".env"
load_dotenv(dotenv_path=_BACKEND_ENV_PATH, override=False)

ENVIRONMENT = str(os.getenv("ENV") or "development").strip().lower()
NEUROPATH_JWT_SECRET = str(os.getenv("NEUROPATH_JWT_SECRET") or "").strip()
ALLOW_UNVERIFIED_JWT_DEV = str(os.getenv("ALLOW_UNVERIFIED_JWT_DEV", "false")).strip().lower() in {"1", "true", "yes", "on"}

SESSION_STORE_PATH = str(os.getenv("SESSION_STORE_PATH") or "").strip()

LLM_ENABLED = str(os.getenv("LLM_ENABLED", "false")).strip().lower() in {"1", "true", "yes", "on"}
LLM_BASE_URL = str(os.getenv("LLM_BASE_URL") or "http://localhost:1234/v1").strip()  # LM Studio default port
LLM_API_KEY = str(os.getenv("LLM_API_KEY") or "lm-studio").strip()
LLM_MODEL = str(os.getenv("LLM_MODEL") or "local-model").strip()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not str(raw).strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not str(raw).strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


LLM_TIMEOUT_SEC = max(1.0, _env_float("LLM_TIMEOUT_SEC", 30.0))


def difficulty_config_from_env() -> DifficultyConfig:
    defaults = DifficultyConfig()
    return DifficultyConfig(
        min_level=_env_int("DIFFICULTY_MIN_LEVEL", defaults.min_level),
        max_level=_env_int("DIFFICULTY_MAX_LEVEL", defaults.max_level),
        increase_threshold=_env_float("DIFFICULTY_INCREASE_THRESHOLD", defaults.increase_threshold),
        decrease_threshold=_env_float("DIFFICULTY_DECREASE_THRESHOLD", defaults.decrease_threshold),
        trend_decrease_threshold=_env_float("DIFFICULTY_TREND_DECREASE_THRESHOLD", defaults.trend_decrease_threshold),
        min_samples_for_decision=_env_int("DIFFICULTY_MIN_SAMPLES", defaults.min_samples_for_decision),
    )
