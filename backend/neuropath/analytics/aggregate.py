from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass
from datetime import date, timedelta
from typing import Any, Iterable

from neuropath.analytics.history import as_scored, mean, timestamp_of, utc_today
from neuropath.scoring.calculator import ScoreCalculator
from neuropath.scoring.models import ScoredSession

LONG_WINDOW_SIZE = 5
SKILL_PROGRESS_SESSION_CAP = 20


@dataclass
class AggregatedMetrics:
    total_sessions: int = 0
    average_accuracy: float = 0.0
    best_score: int = 0
    lowest_score: int = 0
    average_score: float = 0.0
    average_duration: int = 0
    average_efficiency: float = 0.0
    total_time: int = 0
    improvement_trend: float = 0.0
    improvement_percent: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class GameTypeMetrics:
    game_type: str
    session_count: int = 0
    average_score: float = 0.0
    best_score: int = 0
    average_accuracy: float = 0.0
    most_used_difficulty: int = 0
    average_time: int = 0
    average_reaction_time_ms: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class DailyActivity:
    day: str
    date: str
    sessions: int
    average_score: float

    def to_dict(self) -> dict:
        return asdict(self)


def _chronological(sessions: list[ScoredSession]) -> list[ScoredSession]:
    return sorted(sessions, key=lambda item: timestamp_of(item))


def aggregate(history: Iterable[Any], calculator: ScoreCalculator | None = None) -> AggregatedMetrics:
    sessions = _chronological(as_scored(history, calculator or ScoreCalculator()))
    if not sessions:
        return AggregatedMetrics()

    scores = [item.breakdown.overall_score for item in sessions]
    durations = [max(0, int(item.metrics.elapsed_seconds)) for item in sessions]
    metrics = AggregatedMetrics(
        total_sessions=len(sessions),
        average_accuracy=round(mean([item.breakdown.accuracy_percent for item in sessions]), 2),
        best_score=max(scores),
        lowest_score=min(scores),
        average_score=round(mean(scores), 2),
        average_duration=int(mean(durations)),
        average_efficiency=round(mean([item.breakdown.efficiency_percent for item in sessions]), 2),
        total_time=sum(durations),
    )

    if len(sessions) >= LONG_WINDOW_SIZE * 2:
        early_avg = mean(scores[:LONG_WINDOW_SIZE])
        late_avg = mean(scores[-LONG_WINDOW_SIZE:])
        metrics.improvement_trend = round(late_avg - early_avg, 2)
        metrics.improvement_percent = round((late_avg - early_avg) / early_avg * 100.0, 2) if early_avg > 0 else 0.0

    return metrics


def game_type_metrics(history: Iterable[Any], game_type: str, calculator: ScoreCalculator | None = None) -> GameTypeMetrics:
    sessions = [
        item
        for item in as_scored(history, calculator or ScoreCalculator())
        if item.metrics.game_type == game_type
    ]
    if not sessions:
        return GameTypeMetrics(game_type=game_type)

    # Ties go to the level seen first.
    difficulty_counts = Counter(item.metrics.difficulty_level for item in sessions)
    reactions = [
        float(item.metrics.reaction_time_ms)
        for item in sessions
        if item.breakdown.speed_measured and item.metrics.reaction_time_ms is not None
    ]

    return GameTypeMetrics(
        game_type=game_type,
        session_count=len(sessions),
        average_score=round(mean([item.breakdown.overall_score for item in sessions]), 2),
        best_score=max(item.breakdown.overall_score for item in sessions),
        average_accuracy=round(mean([item.breakdown.accuracy_percent for item in sessions]), 2),
        most_used_difficulty=difficulty_counts.most_common(1)[0][0],
        average_time=int(mean([max(0, int(item.metrics.elapsed_seconds)) for item in sessions])),
        average_reaction_time_ms=round(mean(reactions), 2),
    )


def game_types(history: Iterable[Any], calculator: ScoreCalculator | None = None) -> list[str]:
    seen: list[str] = []
    for item in as_scored(history, calculator or ScoreCalculator()):
        if item.metrics.game_type not in seen:
            seen.append(item.metrics.game_type)
    return seen


def skill_progress(
    history: Iterable[Any],
    calculator: ScoreCalculator | None = None,
) -> float:
    calc = calculator or ScoreCalculator()
    sessions = as_scored(history, calc)
    if not sessions:
        return 0.0

    max_level = max(1, calc.config.max_level)
    top_level = max(calc.config.clamp_level(item.metrics.difficulty_level) for item in sessions)
    difficulty_progress = (top_level / max_level) * 40.0
    accuracy_progress = mean([item.breakdown.accuracy_percent for item in sessions]) * 0.4
    volume_progress = (min(len(sessions), SKILL_PROGRESS_SESSION_CAP) / SKILL_PROGRESS_SESSION_CAP) * 20.0

    return round(max(0.0, min(100.0, difficulty_progress + accuracy_progress + volume_progress)), 2)


def weekly_activity(
    history: Iterable[Any],
    today: date | None = None,
    calculator: ScoreCalculator | None = None,
) -> list[DailyActivity]:
    sessions = as_scored(history, calculator or ScoreCalculator())
    anchor = today or utc_today()

    by_day: dict[date, list[int]] = {}
    for item in sessions:
        stamp = timestamp_of(item)
        if stamp is None:
            continue
        by_day.setdefault(stamp.date(), []).append(item.breakdown.overall_score)

    rows = []
    for offset in range(6, -1, -1):
        day = anchor - timedelta(days=offset)
        scores = by_day.get(day, [])
        rows.append(
            DailyActivity(
                day=day.strftime("%a"),
                date=day.isoformat(),
                sessions=len(scores),
                average_score=round(mean(scores), 2),
            )
        )
    return rows
