from __future__ import annotations

import math
from datetime import date, datetime, timezone
from typing import Any, Iterable

from neuropath.scoring.calculator import ScoreCalculator
from neuropath.scoring.models import ScoreBreakdown, ScoredSession, SessionMetrics


def score_of(item: Any, calculator: ScoreCalculator) -> float:
    if isinstance(item, ScoredSession):
        value = item.breakdown.overall_score
    elif isinstance(item, ScoreBreakdown):
        value = item.overall_score
    elif isinstance(item, SessionMetrics):
        value = calculator.score(item).overall_score
    else:
        try:
            value = float(item)
        except (TypeError, ValueError):
            return 0.0
    value = float(value)
    if not math.isfinite(value):
        return 0.0
    return max(0.0, min(100.0, value))


def timestamp_of(item: Any) -> datetime | None:
    if isinstance(item, ScoredSession):
        stamp = item.metrics.timestamp
    elif isinstance(item, SessionMetrics):
        stamp = item.timestamp
    else:
        return None
    if not isinstance(stamp, datetime):
        return None
    if stamp.tzinfo is None:
        return stamp.replace(tzinfo=timezone.utc)
    return stamp.astimezone(timezone.utc)


def as_scored(items: Iterable[Any], calculator: ScoreCalculator) -> list[ScoredSession]:
    """Keeps only entries that carry telemetry, scoring bare metrics on the way."""
    scored: list[ScoredSession] = []
    for item in list(items or []):
        if isinstance(item, ScoredSession):
            scored.append(item)
        elif isinstance(item, SessionMetrics):
            scored.append(ScoredSession(metrics=item, breakdown=calculator.score(item)))
    return scored


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0
