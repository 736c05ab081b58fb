from neuropath.difficulty.advisor import difficulty_name
from neuropath.scoring.models import DifficultyDecision, ReasonCode, ScoreBreakdown, SessionMetrics


REASON_MESSAGES = {
    ReasonCode.INSUFFICIENT_DATA: "Keep playing to build your performance history.",
    ReasonCode.STRONG_PERFORMANCE: "You're doing great! Time for a new challenge.",
    ReasonCode.WEAK_PERFORMANCE: "Let's practice at an easier level to build confidence.",
    ReasonCode.STEADY_PERFORMANCE: "Nice and steady. You're at the right level for now.",
}


def encouragement_for(decision: DifficultyDecision) -> str:
    base = REASON_MESSAGES.get(decision.reason_code, REASON_MESSAGES[ReasonCode.STEADY_PERFORMANCE])
    if decision.reason_code in {ReasonCode.STRONG_PERFORMANCE, ReasonCode.WEAK_PERFORMANCE}:
        return f"{base} Next level: {difficulty_name(decision.recommended_level)}."
    return base


def performance_level(score: float) -> str:
    value = float(score or 0.0)
    if value >= 90:
        return "Excellent"
    if value >= 80:
        return "Very Good"
    if value >= 70:
        return "Good"
    if value >= 60:
        return "Keep Going"
    return "Practice More"


def improvement_suggestions(metrics: SessionMetrics, breakdown: ScoreBreakdown) -> list[str]:
    suggestions: list[str] = []

    if breakdown.accuracy_percent < 70:
        suggestions.append("Focus on accuracy: take a moment before each move.")
    if breakdown.speed_measured and breakdown.speed_score < 50:
        suggestions.append("Work on recognizing patterns a little faster.")
    if breakdown.consistency_percent < 70:
        suggestions.append("Stay focused and avoid rushing to keep errors down.")
    if max(0, metrics.error_count) > max(0, metrics.total_moves) * 0.3:
        suggestions.append("Pay closer attention to details before committing to a move.")

    if not suggestions:
        suggestions.append("Fantastic performance! Ready for the next challenge?")
    return suggestions
