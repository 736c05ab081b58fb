import math

import pytest

from neuropath.scoring.calculator import ScoreCalculator, reaction_baseline_ms
from neuropath.scoring.models import DifficultyConfig


def _all_fields_in_range(breakdown) -> bool:
    values = [
        breakdown.accuracy_percent,
        breakdown.efficiency_percent,
        breakdown.speed_score,
        breakdown.consistency_percent,
        breakdown.overall_score,
    ]
    return all(math.isfinite(value) and 0.0 <= value <= 100.0 for value in values)


def test_typical_session_blend(make_metrics):
    breakdown = ScoreCalculator().score(make_metrics())

    assert breakdown.accuracy_percent == 80.0
    assert breakdown.efficiency_percent == 80.0
    assert breakdown.consistency_percent == 80.0
    assert breakdown.speed_measured is False
    assert breakdown.speed_score == 0.0
    # 0.8 * 80 blend + 8 difficulty bonus + 1 time bonus
    assert breakdown.overall_score == 73


def test_reaction_time_joins_blend(make_metrics):
    breakdown = ScoreCalculator().score(make_metrics(reaction_time_ms=1000))

    assert breakdown.speed_measured is True
    assert breakdown.speed_score == pytest.approx(99.6)
    assert breakdown.overall_score == 77


def test_zero_moves_and_zero_time_do_not_divide_by_zero(make_metrics):
    metrics = make_metrics(total_moves=0, correct_matches=0, error_count=0, elapsed_seconds=0, difficulty_level=1)
    breakdown = ScoreCalculator().score(metrics)

    assert breakdown.accuracy_percent == 0.0
    assert breakdown.efficiency_percent == 0.0
    assert breakdown.consistency_percent == 0.0
    assert breakdown.overall_score == 4
    assert _all_fields_in_range(breakdown)


def test_perfect_fast_expert_session_is_capped(make_metrics):
    metrics = make_metrics(difficulty_level=5, total_moves=10, correct_matches=10, error_count=0, elapsed_seconds=10)
    assert ScoreCalculator().score(metrics).overall_score == 100


def test_slow_session_penalty_is_capped(make_metrics):
    metrics = make_metrics(difficulty_level=1, total_moves=10, correct_matches=5, error_count=5, elapsed_seconds=400)
    # 0.8 * 50 + 4 difficulty bonus - 10 capped penalty
    assert ScoreCalculator().score(metrics).overall_score == 34


def test_correct_above_total_is_clamped(make_metrics):
    breakdown = ScoreCalculator().score(make_metrics(total_moves=10, correct_matches=15, error_count=0))
    assert breakdown.accuracy_percent == 100.0
    assert _all_fields_in_range(breakdown)


def test_negative_and_garbage_inputs_stay_in_range(make_metrics):
    metrics = make_metrics(
        total_moves=-5,
        correct_matches=-3,
        error_count=-1,
        elapsed_seconds=-10,
        difficulty_level=-2,
        reaction_time_ms=-50,
    )
    breakdown = ScoreCalculator().score(metrics)
    assert _all_fields_in_range(breakdown)


def test_nan_reaction_time_is_ignored(make_metrics):
    breakdown = ScoreCalculator().score(make_metrics(reaction_time_ms=float("nan")))
    assert breakdown.speed_measured is False
    assert breakdown.overall_score == 73


def test_negative_reaction_time_is_not_a_measurement(make_metrics):
    calculator = ScoreCalculator()
    negative = calculator.score(make_metrics(reaction_time_ms=-5000))
    slow_but_valid = calculator.score(make_metrics(reaction_time_ms=2500))

    assert negative.speed_measured is False
    assert negative.speed_score == 0.0
    assert negative.overall_score == calculator.score(make_metrics()).overall_score == 73
    assert slow_but_valid.speed_measured is True
    assert slow_but_valid.speed_score == 99.0
    assert negative.speed_score < slow_but_valid.speed_score


def test_error_heavy_session_floors_consistency(make_metrics):
    breakdown = ScoreCalculator().score(make_metrics(total_moves=10, correct_matches=2, error_count=40))
    assert breakdown.consistency_percent == 0.0


def test_optimal_moves_drive_efficiency(make_metrics):
    breakdown = ScoreCalculator().score(make_metrics(total_moves=20, correct_matches=16, optimal_moves=10))
    assert breakdown.efficiency_percent == 50.0
    assert breakdown.accuracy_percent == 80.0


def test_accuracy_is_monotonic_in_correct_matches(make_metrics):
    calculator = ScoreCalculator()
    previous = -1.0
    for correct in range(0, 21):
        accuracy = calculator.score(make_metrics(total_moves=20, correct_matches=correct)).accuracy_percent
        assert accuracy >= previous
        previous = accuracy


def test_scoring_is_deterministic(make_metrics):
    calculator = ScoreCalculator()
    metrics = make_metrics(reaction_time_ms=1234.5)
    assert calculator.score(metrics) == calculator.score(metrics)


def test_harder_level_requires_faster_reactions(make_metrics):
    calculator = ScoreCalculator()
    easy = calculator.score(make_metrics(difficulty_level=1, reaction_time_ms=3000))
    hard = calculator.score(make_metrics(difficulty_level=5, reaction_time_ms=3000))
    assert easy.speed_score > hard.speed_score


def test_out_of_range_difficulty_is_clamped(make_metrics):
    calculator = ScoreCalculator()
    assert calculator.score(make_metrics(difficulty_level=42)) == calculator.score(make_metrics(difficulty_level=5))


def test_reaction_baseline_interpolates_between_levels():
    config = DifficultyConfig(reaction_baselines_ms={1: 3000, 5: 1000})
    assert reaction_baseline_ms(3, config) == pytest.approx(2000.0)
    assert reaction_baseline_ms(1, DifficultyConfig()) == 3000.0
    assert reaction_baseline_ms(7, DifficultyConfig(max_level=10)) == 1000.0


def test_score_many_pairs_each_session(make_metrics):
    sessions = [make_metrics(days_ago=1), make_metrics(correct_matches=20, error_count=0)]
    scored = ScoreCalculator().score_many(sessions)
    assert [item.metrics for item in scored] == sessions
    assert scored[1].breakdown.accuracy_percent == 100.0
