from __future__ import annotations

from datetime import date

from core.logger import log_event
from neuropath.analytics.aggregate import aggregate, game_type_metrics, game_types, skill_progress, weekly_activity
from neuropath.analytics.trend import TrendAnalyzer
from neuropath.difficulty.advisor import DifficultyAdvisor, difficulty_name
from neuropath.feedback.annotator import EncouragementAnnotator
from neuropath.feedback.messages import improvement_suggestions, performance_level
from neuropath.scoring.calculator import ScoreCalculator
from neuropath.scoring.models import DifficultyConfig, DifficultyDecision, ScoreBreakdown, ScoredSession, SessionMetrics
from neuropath.sessions.store import SessionHistoryStore
from neuropath.system_metrics import increment_metric, observe_decision, observe_score

DEFAULT_ADVICE_WINDOW = 10
MAX_ADVICE_WINDOW = 50


class ProgressService:
    def __init__(
        self,
        store: SessionHistoryStore | None = None,
        config: DifficultyConfig | None = None,
        annotator: EncouragementAnnotator | None = None,
    ):
        self.config = config or DifficultyConfig()
        self.store = store or SessionHistoryStore()
        self.calculator = ScoreCalculator(self.config)
        self.trend_analyzer = TrendAnalyzer(calculator=self.calculator)
        self.advisor = DifficultyAdvisor(
            config=self.config,
            calculator=self.calculator,
            trend_analyzer=self.trend_analyzer,
        )
        self.annotator = annotator or EncouragementAnnotator()

    def score(self, metrics: SessionMetrics) -> dict:
        breakdown = self.calculator.score(metrics)
        observe_score(breakdown.overall_score)
        return self._score_payload(metrics, breakdown)

    def _score_payload(self, metrics: SessionMetrics, breakdown: ScoreBreakdown) -> dict:
        return {
            "score": breakdown.to_dict(),
            "performance_level": performance_level(breakdown.overall_score),
            "suggestions": improvement_suggestions(metrics, breakdown),
        }

    def record_session(self, owner_id: str, metrics: SessionMetrics) -> dict:
        stored = self.store.append(owner_id, metrics)
        breakdown = self.calculator.score(stored)
        increment_metric("sessions_recorded")
        observe_score(breakdown.overall_score)
        log_event(
            "progress",
            "session_recorded",
            owner_id,
            session_id=stored.session_id,
            game_type=stored.game_type,
            difficulty_level=stored.difficulty_level,
            overall_score=breakdown.overall_score,
        )
        payload = self._score_payload(stored, breakdown)
        payload["session"] = stored.to_dict()
        return payload

    def history(self, owner_id: str, limit: int | None = None) -> list[ScoredSession]:
        return self.calculator.score_many(self.store.get_history(owner_id, limit=limit))

    def advise(self, owner_id: str, current_level: int, window: int = DEFAULT_ADVICE_WINDOW) -> tuple[DifficultyDecision, bool]:
        capped = max(1, min(int(window or DEFAULT_ADVICE_WINDOW), MAX_ADVICE_WINDOW))
        recent = self.history(owner_id, limit=capped)
        decision = self.advisor.advise(current_level, recent)
        ready = self.advisor.is_ready_to_advance(current_level, recent)
        observe_decision(decision.direction.value)
        log_event(
            "progress",
            "difficulty_advised",
            owner_id,
            current_level=current_level,
            recommended_level=decision.recommended_level,
            direction=decision.direction,
            reason_code=decision.reason_code,
            confidence=decision.confidence,
            samples=len(recent),
        )
        return decision, ready

    def decision_payload(self, decision: DifficultyDecision, ready: bool, message: str) -> dict:
        payload = decision.to_dict()
        payload["level_name"] = difficulty_name(decision.recommended_level)
        payload["ready_to_advance"] = bool(ready)
        payload["message"] = message
        return payload

    async def annotate(self, decision: DifficultyDecision, breakdown: ScoreBreakdown | None = None) -> str:
        return await self.annotator.annotate(decision, breakdown)

    def trend(self, owner_id: str, today: date | None = None) -> dict:
        return self.trend_analyzer.summarize(self.history(owner_id), today=today).to_dict()

    def summary(self, owner_id: str, today: date | None = None) -> dict:
        sessions = self.history(owner_id)
        return {
            "owner_id": owner_id,
            "overall": aggregate(sessions, self.calculator).to_dict(),
            "games": [game_type_metrics(sessions, name, self.calculator).to_dict() for name in game_types(sessions, self.calculator)],
            "skill_progress": skill_progress(sessions, self.calculator),
            "weekly_activity": [row.to_dict() for row in weekly_activity(sessions, today=today, calculator=self.calculator)],
            "trend": self.trend_analyzer.summarize(sessions, today=today).to_dict(),
        }
