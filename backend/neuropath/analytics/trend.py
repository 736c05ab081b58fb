from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Sequence

from neuropath.analytics.history import mean, score_of, timestamp_of, utc_today
from neuropath.scoring.calculator import ScoreCalculator
from neuropath.scoring.models import TrendSummary


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


@dataclass
class TrendAnalyzer:
    calculator: ScoreCalculator = field(default_factory=ScoreCalculator)
    direction_band_percent: float = 5.0

    def improvement_percent(self, history: Sequence[Any]) -> float:
        """Percent change from the earlier half of the history to the recent half.

        With an odd count the extra element belongs to the recent half.
        """
        scores = [score_of(item, self.calculator) for item in list(history or [])]
        if len(scores) < 2:
            return 0.0

        split = len(scores) // 2
        first_avg = mean(scores[:split])
        second_avg = mean(scores[split:])
        if first_avg == 0:
            return 0.0
        return round(_finite((second_avg - first_avg) / first_avg * 100.0), 2)

    def velocity_per_week(self, history: Sequence[Any]) -> float:
        dated = [(timestamp_of(item), item) for item in list(history or [])]
        dated = [(stamp, item) for stamp, item in dated if stamp is not None]
        if len(dated) < 2:
            return 0.0

        dated.sort(key=lambda pair: pair[0])
        first_stamp, first_item = dated[0]
        last_stamp, last_item = dated[-1]
        days = (last_stamp - first_stamp).total_seconds() / 86400.0
        if days < 1:
            return 0.0

        delta = score_of(last_item, self.calculator) - score_of(first_item, self.calculator)
        return round(_finite(delta / (days / 7.0)), 2)

    def streaks(self, history: Sequence[Any], today: date | None = None) -> tuple[int, int]:
        days = sorted(
            {stamp.date() for stamp in (timestamp_of(item) for item in list(history or [])) if stamp is not None},
            reverse=True,
        )
        if not days:
            return 0, 0

        anchor = today or utc_today()
        active = set(days)
        current = 0
        if anchor in active or (anchor - timedelta(days=1)) in active:
            check = anchor if anchor in active else anchor - timedelta(days=1)
            while check in active:
                current += 1
                check -= timedelta(days=1)

        longest = 1
        run = 1
        for newer, older in zip(days, days[1:]):
            if (newer - older).days == 1:
                run += 1
            else:
                run = 1
            longest = max(longest, run)

        return current, longest

    def direction(self, improvement: float) -> str:
        band = abs(float(self.direction_band_percent))
        if improvement > band:
            return "improving"
        if improvement < -band:
            return "declining"
        return "stable"

    def summarize(self, history: Sequence[Any], today: date | None = None) -> TrendSummary:
        items = list(history or [])
        improvement = self.improvement_percent(items)
        current, longest = self.streaks(items, today=today)
        return TrendSummary(
            improvement_percent=improvement,
            velocity_per_week=self.velocity_per_week(items),
            current_streak_days=current,
            longest_streak_days=longest,
            session_count=len(items),
            direction=self.direction(improvement),
        )
