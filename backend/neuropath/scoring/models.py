from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


def _default_reaction_baselines() -> dict[int, float]:
    return {1: 3000.0, 2: 2500.0, 3: 2000.0, 4: 1500.0, 5: 1000.0}


def _safe_int(value: Any, default: int = 0) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return int(number)


def _safe_optional_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)) and math.isfinite(value):
        return datetime.fromtimestamp(float(value), tz=timezone.utc)
    text = str(value or "").strip()
    if text:
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            pass
    return datetime.now(timezone.utc)


class DifficultyDirection(str, Enum):
    INCREASE = "increase"
    MAINTAIN = "maintain"
    DECREASE = "decrease"


class ReasonCode(str, Enum):
    INSUFFICIENT_DATA = "insufficient_data"
    STRONG_PERFORMANCE = "strong_performance"
    WEAK_PERFORMANCE = "weak_performance"
    STEADY_PERFORMANCE = "steady_performance"


@dataclass(frozen=True)
class DifficultyConfig:
    min_level: int = 1
    max_level: int = 5
    increase_threshold: float = 75.0
    decrease_threshold: float = 40.0
    trend_decrease_threshold: float = -10.0
    min_samples_for_decision: int = 3

    # Scoring parameters shared by every game type.
    reaction_baselines_ms: dict[int, float] = field(default_factory=_default_reaction_baselines, hash=False)
    accuracy_weight: float = 0.4
    efficiency_weight: float = 0.4
    speed_weight: float = 0.4
    consistency_weight: float = 0.2
    max_difficulty_bonus: float = 20.0
    expected_base_seconds: int = 30
    expected_seconds_per_level: int = 10
    max_time_bonus: float = 10.0
    time_penalty_rate: float = 5.0
    max_time_penalty: float = 10.0

    def __post_init__(self):
        low = _safe_int(self.min_level, 1)
        high = _safe_int(self.max_level, 5)
        if high < low:
            low, high = high, low
        object.__setattr__(self, "min_level", low)
        object.__setattr__(self, "max_level", high)

    def clamp_level(self, level: Any) -> int:
        return max(self.min_level, min(self.max_level, _safe_int(level, self.min_level)))


@dataclass(frozen=True)
class SessionMetrics:
    """Raw telemetry of one completed game or activity attempt."""

    game_type: str
    difficulty_level: int
    total_moves: int
    correct_matches: int
    error_count: int
    elapsed_seconds: int
    timestamp: datetime
    reaction_time_ms: float | None = None
    optimal_moves: int | None = None
    session_id: str = ""

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "game_type": self.game_type,
            "difficulty_level": self.difficulty_level,
            "total_moves": self.total_moves,
            "correct_matches": self.correct_matches,
            "error_count": self.error_count,
            "elapsed_seconds": self.elapsed_seconds,
            "reaction_time_ms": self.reaction_time_ms,
            "optimal_moves": self.optimal_moves,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "SessionMetrics":
        data = dict(payload or {})
        optimal = data.get("optimal_moves")
        return cls(
            game_type=str(data.get("game_type") or "unknown"),
            difficulty_level=_safe_int(data.get("difficulty_level"), 1),
            total_moves=_safe_int(data.get("total_moves")),
            correct_matches=_safe_int(data.get("correct_matches", data.get("correct_answers"))),
            error_count=_safe_int(data.get("error_count")),
            elapsed_seconds=_safe_int(data.get("elapsed_seconds")),
            timestamp=_parse_timestamp(data.get("timestamp")),
            reaction_time_ms=_safe_optional_float(data.get("reaction_time_ms")),
            optimal_moves=None if optimal is None else _safe_int(optimal),
            session_id=str(data.get("session_id") or ""),
        )


@dataclass(frozen=True)
class ScoreBreakdown:
    accuracy_percent: float
    efficiency_percent: float
    speed_score: float
    consistency_percent: float
    overall_score: int
    speed_measured: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ScoredSession:
    metrics: SessionMetrics
    breakdown: ScoreBreakdown

    def to_dict(self) -> dict:
        payload = self.metrics.to_dict()
        payload["score"] = self.breakdown.to_dict()
        return payload


@dataclass(frozen=True)
class DifficultyDecision:
    recommended_level: int
    direction: DifficultyDirection
    confidence: float
    reason_code: ReasonCode
    average_score: float = 0.0
    trend_percent: float = 0.0

    def to_dict(self) -> dict:
        return {
            "recommended_level": self.recommended_level,
            "direction": self.direction.value,
            "confidence": self.confidence,
            "reason_code": self.reason_code.value,
            "average_score": self.average_score,
            "trend_percent": self.trend_percent,
        }


@dataclass(frozen=True)
class TrendSummary:
    improvement_percent: float
    velocity_per_week: float
    current_streak_days: int
    longest_streak_days: int
    session_count: int = 0
    direction: str = "stable"

    def to_dict(self) -> dict:
        return asdict(self)
