from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable

from neuropath.scoring.models import DifficultyConfig, ScoreBreakdown, ScoredSession, SessionMetrics


def _finite(value, default: float = 0.0) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _non_negative(value) -> float:
    return max(0.0, _finite(value, 0.0))


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, _finite(value, low)))


def reaction_baseline_ms(level: int, config: DifficultyConfig) -> float:
    """Baseline reaction time for a level.

    Levels between two table entries are linearly interpolated; levels outside
    the table use the nearest defined entry.
    """
    table = sorted(
        (int(key), _finite(value, 0.0))
        for key, value in (config.reaction_baselines_ms or {}).items()
        if _finite(value, 0.0) > 0
    )
    if not table:
        return 2000.0
    if level <= table[0][0]:
        return table[0][1]
    if level >= table[-1][0]:
        return table[-1][1]

    for (low_level, low_ms), (high_level, high_ms) in zip(table, table[1:]):
        if low_level <= level <= high_level:
            span = high_level - low_level
            ratio = (level - low_level) / span if span else 0.0
            return low_ms + (high_ms - low_ms) * ratio
    return table[-1][1]


@dataclass
class ScoreCalculator:
    config: DifficultyConfig = field(default_factory=DifficultyConfig)

    def _time_adjustment(self, elapsed: float, level: int) -> float:
        cfg = self.config
        if elapsed <= 0:
            return 0.0
        expected = _non_negative(cfg.expected_base_seconds) + _non_negative(cfg.expected_seconds_per_level) * level
        if expected <= 0:
            return 0.0
        if elapsed <= expected:
            return ((expected - elapsed) / expected) * _non_negative(cfg.max_time_bonus)
        penalty = ((elapsed - expected) / expected) * _non_negative(cfg.time_penalty_rate)
        return -min(_non_negative(cfg.max_time_penalty), penalty)

    def score(self, metrics: SessionMetrics) -> ScoreBreakdown:
        cfg = self.config
        level = cfg.clamp_level(metrics.difficulty_level)
        total = _non_negative(metrics.total_moves)
        correct = min(_non_negative(metrics.correct_matches), total)
        errors = _non_negative(metrics.error_count)
        elapsed = _non_negative(metrics.elapsed_seconds)

        if total > 0:
            accuracy = _clamp(correct / total * 100.0)
            optimal = _non_negative(metrics.optimal_moves) if metrics.optimal_moves is not None else 0.0
            if optimal > 0:
                efficiency = _clamp(optimal / total * 100.0)
            else:
                efficiency = accuracy
            consistency = _clamp(100.0 - (errors / total) * 100.0)
        else:
            accuracy = efficiency = consistency = 0.0

        # Negative or non-finite reaction times are invalid readings, not fast ones.
        reaction = _finite(metrics.reaction_time_ms, math.nan) if metrics.reaction_time_ms is not None else math.nan
        speed_measured = math.isfinite(reaction) and reaction >= 0
        speed = 0.0
        if speed_measured:
            baseline = reaction_baseline_ms(level, cfg)
            speed = _clamp(100.0 - reaction / baseline)

        components = [
            (accuracy, _non_negative(cfg.accuracy_weight)),
            (efficiency, _non_negative(cfg.efficiency_weight)),
            (consistency, _non_negative(cfg.consistency_weight)),
        ]
        if speed_measured:
            components.append((speed, _non_negative(cfg.speed_weight)))

        weight_total = sum(weight for _, weight in components)
        blend = sum(value * weight for value, weight in components) / weight_total if weight_total > 0 else 0.0

        bonus_cap = _clamp(cfg.max_difficulty_bonus)
        performance_points = blend * (100.0 - bonus_cap) / 100.0
        difficulty_bonus = bonus_cap * (level / cfg.max_level) if cfg.max_level > 0 else 0.0
        time_adjustment = self._time_adjustment(elapsed, level)

        weighted_sum = _finite(performance_points + difficulty_bonus + time_adjustment, 0.0)
        overall = int(_clamp(round(weighted_sum)))

        return ScoreBreakdown(
            accuracy_percent=round(accuracy, 2),
            efficiency_percent=round(efficiency, 2),
            speed_score=round(speed, 2),
            consistency_percent=round(consistency, 2),
            overall_score=overall,
            speed_measured=speed_measured,
        )

    def score_many(self, sessions: Iterable[SessionMetrics]) -> list[ScoredSession]:
        return [ScoredSession(metrics=item, breakdown=self.score(item)) for item in list(sessions or [])]
