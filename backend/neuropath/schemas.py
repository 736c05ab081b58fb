from datetime import datetime, timezone

from pydantic import BaseModel, Field

from neuropath.scoring.models import SessionMetrics


class SessionMetricsRequest(BaseModel):
    game_type: str = Field(min_length=1, max_length=50)
    difficulty_level: int = Field(default=1, ge=0)
    total_moves: int = Field(default=0, ge=0)
    correct_matches: int = Field(default=0, ge=0)
    error_count: int = Field(default=0, ge=0)
    elapsed_seconds: int = Field(default=0, ge=0)
    reaction_time_ms: float | None = Field(default=None, ge=0)
    optimal_moves: int | None = Field(default=None, ge=0)
    timestamp: datetime | None = None

    def to_metrics(self) -> SessionMetrics:
        return SessionMetrics(
            game_type=self.game_type,
            difficulty_level=self.difficulty_level,
            total_moves=self.total_moves,
            correct_matches=self.correct_matches,
            error_count=self.error_count,
            elapsed_seconds=self.elapsed_seconds,
            timestamp=self.timestamp or datetime.now(timezone.utc),
            reaction_time_ms=self.reaction_time_ms,
            optimal_moves=self.optimal_moves,
        )


class ScoreBreakdownResponse(BaseModel):
    accuracy_percent: float
    efficiency_percent: float
    speed_score: float
    consistency_percent: float
    overall_score: int
    speed_measured: bool


class ScoreResponse(BaseModel):
    score: ScoreBreakdownResponse
    performance_level: str
    suggestions: list[str]


class DifficultyDecisionResponse(BaseModel):
    recommended_level: int
    direction: str
    confidence: float
    reason_code: str
    average_score: float
    trend_percent: float
    level_name: str
    ready_to_advance: bool
    message: str


class TrendSummaryResponse(BaseModel):
    improvement_percent: float
    velocity_per_week: float
    current_streak_days: int
    longest_streak_days: int
    session_count: int
    direction: str
