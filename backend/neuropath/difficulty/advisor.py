from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from neuropath.analytics.history import mean, score_of
from neuropath.analytics.trend import TrendAnalyzer
from neuropath.scoring.calculator import ScoreCalculator
from neuropath.scoring.models import DifficultyConfig, DifficultyDecision, DifficultyDirection, ReasonCode


LEVEL_NAMES = {
    1: "Beginner",
    2: "Easy",
    3: "Medium",
    4: "Hard",
    5: "Expert",
}

STEADY_CONFIDENCE = 0.7
READY_CONFIDENCE = 0.7


def difficulty_name(level: int) -> str:
    try:
        key = int(level)
    except (TypeError, ValueError):
        return "Unknown"
    return LEVEL_NAMES.get(key, f"Level {key}")


def _unit(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


@dataclass
class DifficultyPolicy:
    config: DifficultyConfig = field(default_factory=DifficultyConfig)

    def choose(self, current_level: int, average: float, trend: float) -> DifficultyDecision:
        cfg = self.config
        level = cfg.clamp_level(current_level)

        if average > cfg.increase_threshold and trend >= 0 and level < cfg.max_level:
            headroom = 100.0 - cfg.increase_threshold
            confidence = _unit((average - cfg.increase_threshold) / headroom) if headroom > 0 else 1.0
            return DifficultyDecision(
                recommended_level=cfg.clamp_level(level + 1),
                direction=DifficultyDirection.INCREASE,
                confidence=round(confidence, 4),
                reason_code=ReasonCode.STRONG_PERFORMANCE,
                average_score=round(average, 2),
                trend_percent=trend,
            )

        if (average < cfg.decrease_threshold or trend < cfg.trend_decrease_threshold) and level > cfg.min_level:
            floor = cfg.decrease_threshold
            confidence = _unit((floor - average) / floor) if floor > 0 else 0.0
            return DifficultyDecision(
                recommended_level=cfg.clamp_level(level - 1),
                direction=DifficultyDirection.DECREASE,
                confidence=round(confidence, 4),
                reason_code=ReasonCode.WEAK_PERFORMANCE,
                average_score=round(average, 2),
                trend_percent=trend,
            )

        return DifficultyDecision(
            recommended_level=level,
            direction=DifficultyDirection.MAINTAIN,
            confidence=STEADY_CONFIDENCE,
            reason_code=ReasonCode.STEADY_PERFORMANCE,
            average_score=round(average, 2),
            trend_percent=trend,
        )


class DifficultyAdvisor:
    def __init__(
        self,
        config: DifficultyConfig | None = None,
        calculator: ScoreCalculator | None = None,
        trend_analyzer: TrendAnalyzer | None = None,
    ):
        self.config = config or DifficultyConfig()
        self.calculator = calculator or ScoreCalculator(self.config)
        self.trend_analyzer = trend_analyzer or TrendAnalyzer(calculator=self.calculator)

    def advise(
        self,
        current_level: int,
        recent: Sequence[Any],
        config: DifficultyConfig | None = None,
    ) -> DifficultyDecision:
        cfg = config or self.config
        items = list(recent or [])
        level = cfg.clamp_level(current_level)

        if not items:
            return DifficultyDecision(
                recommended_level=level,
                direction=DifficultyDirection.MAINTAIN,
                confidence=0.0,
                reason_code=ReasonCode.INSUFFICIENT_DATA,
            )

        calculator, trend_analyzer = self._scorers_for(cfg)
        average = mean([score_of(item, calculator) for item in items])
        trend = trend_analyzer.improvement_percent(items)
        return DifficultyPolicy(config=cfg).choose(level, average, trend)

    def _scorers_for(self, cfg: DifficultyConfig) -> tuple[ScoreCalculator, TrendAnalyzer]:
        # Bare metrics must be scored against the same level range the decision uses.
        if cfg is self.config or cfg == self.config:
            return self.calculator, self.trend_analyzer
        calculator = ScoreCalculator(cfg)
        trend_analyzer = TrendAnalyzer(
            calculator=calculator,
            direction_band_percent=self.trend_analyzer.direction_band_percent,
        )
        return calculator, trend_analyzer

    def is_ready_to_advance(
        self,
        current_level: int,
        recent: Sequence[Any],
        config: DifficultyConfig | None = None,
    ) -> bool:
        cfg = config or self.config
        items = list(recent or [])
        if len(items) < max(0, int(cfg.min_samples_for_decision)):
            return False
        decision = self.advise(current_level, items, cfg)
        return decision.direction == DifficultyDirection.INCREASE and decision.confidence > READY_CONFIDENCE
