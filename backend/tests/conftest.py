import base64
import json
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _test_env(monkeypatch: pytest.MonkeyPatch):
    from core import config

    monkeypatch.setenv("ENV", "development")
    monkeypatch.setenv("ALLOW_UNVERIFIED_JWT_DEV", "true")
    monkeypatch.setattr(config, "ENVIRONMENT", "development")
    monkeypatch.setattr(config, "ALLOW_UNVERIFIED_JWT_DEV", True)
    monkeypatch.setattr(config, "NEUROPATH_JWT_SECRET", "")


@pytest.fixture
def make_dev_token():
    def _enc(obj: dict) -> str:
        raw = json.dumps(obj, separators=(",", ":")).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("utf-8").rstrip("=")

    def _make(sub: str = "pytest-user") -> str:
        header = _enc({"alg": "none", "typ": "JWT"})
        payload = _enc({"sub": sub, "iat": 0})
        return f"{header}.{payload}."

    return _make


@pytest.fixture
def dev_jwt_token(make_dev_token) -> str:
    return make_dev_token()


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 11, 20, 15, 30, tzinfo=timezone.utc)


@pytest.fixture
def make_metrics(now):
    from neuropath.scoring.models import SessionMetrics

    def _make(**overrides) -> SessionMetrics:
        values = {
            "game_type": "MemoryMatch",
            "difficulty_level": 2,
            "total_moves": 20,
            "correct_matches": 16,
            "error_count": 4,
            "elapsed_seconds": 45,
            "timestamp": now,
        }
        days_ago = overrides.pop("days_ago", None)
        if days_ago is not None:
            values["timestamp"] = now - timedelta(days=days_ago)
        values.update(overrides)
        return SessionMetrics(**values)

    return _make
