from neuropath.scoring.calculator import ScoreCalculator
from neuropath.scoring.models import (
    DifficultyConfig,
    DifficultyDecision,
    DifficultyDirection,
    ReasonCode,
    ScoreBreakdown,
    ScoredSession,
    SessionMetrics,
    TrendSummary,
)

__all__ = [
    "DifficultyConfig",
    "DifficultyDecision",
    "DifficultyDirection",
    "ReasonCode",
    "ScoreBreakdown",
    "ScoreCalculator",
    "ScoredSession",
    "SessionMetrics",
    "TrendSummary",
]
