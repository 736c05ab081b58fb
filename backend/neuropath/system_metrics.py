import threading
import time
from typing import Any


_lock = threading.Lock()
_counters: dict[str, int] = {
    "sessions_recorded": 0,
    "sessions_scored": 0,
    "difficulty_decisions": 0,
    "annotations_generated": 0,
    "annotation_fallbacks": 0,
}
_score_total = 0.0
_direction_counts: dict[str, int] = {"increase": 0, "maintain": 0, "decrease": 0}


def increment_metric(name: str, amount: int = 1) -> None:
    key = str(name or "").strip()
    if not key:
        return
    with _lock:
        _counters[key] = _counters.get(key, 0) + int(amount)


def observe_score(overall_score: float) -> None:
    global _score_total
    with _lock:
        _counters["sessions_scored"] = _counters.get("sessions_scored", 0) + 1
        _score_total += max(0.0, float(overall_score or 0.0))


def observe_decision(direction: str) -> None:
    key = str(direction or "").strip().lower()
    with _lock:
        _counters["difficulty_decisions"] = _counters.get("difficulty_decisions", 0) + 1
        if key in _direction_counts:
            _direction_counts[key] += 1


def reset_metrics() -> None:
    global _score_total
    with _lock:
        for key in list(_counters):
            _counters[key] = 0
        for key in _direction_counts:
            _direction_counts[key] = 0
        _score_total = 0.0


def get_metrics_snapshot(extra: dict[str, Any] | None = None) -> dict[str, Any]:
    with _lock:
        counters = dict(_counters)
        directions = dict(_direction_counts)
        score_total = _score_total

    scored = max(1, counters.get("sessions_scored", 0))
    payload: dict[str, Any] = {"generated_at": time.time(), **counters}
    payload["avg_overall_score"] = round(score_total / scored, 2) if counters.get("sessions_scored") else 0.0
    payload["decisions_by_direction"] = directions

    if extra:
        payload.update(extra)
    return payload
