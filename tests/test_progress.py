"""Tests for staged milestone progress."""

import pytest

from app.fitness.progress import compute_milestone_progress, evaluate_milestones
from app.fitness.validation import InvalidInput
from tests.conftest import day, make_goal, make_log, make_milestones


def _pcts(results):
    return [r.progress_percentage for r in results]


class TestEvaluateMilestones:
    def test_worked_example(self):
        results = evaluate_milestones(make_milestones(195, 190, 185, 180), 200.0, 187.0)
        assert [r.completed for r in results] == [True, True, False, False]
        assert [r.current for r in results] == [False, False, True, False]
        assert _pcts(results) == [100, 100, 60, 0]

    def test_at_start(self):
        results = evaluate_milestones(make_milestones(195, 190, 185, 180), 200.0, 200.0)
        assert _pcts(results) == [0, 0, 0, 0]
        assert results[0].current

    def test_first_segment_measured_from_start(self):
        results = evaluate_milestones(make_milestones(195, 190), 200.0, 198.0)
        assert _pcts(results) == [40, 0]

    def test_rounds_half_up(self):
        # (200 - 199.5) / (200 - 196) = 12.5%
        results = evaluate_milestones(make_milestones(196, 192), 200.0, 199.5)
        assert results[0].progress_percentage == 13

    def test_all_complete(self):
        results = evaluate_milestones(make_milestones(195, 190, 185, 180), 200.0, 178.0)
        assert all(r.completed for r in results)
        assert not any(r.current for r in results)
        assert _pcts(results) == [100, 100, 100, 100]

    def test_exactly_one_current_unless_all_completed(self):
        ms = make_milestones(195, 190, 185, 180)
        for weight in (201.0, 200.0, 196.0, 193.0, 190.0, 184.0, 181.0, 180.0, 170.0):
            results = evaluate_milestones(ms, 200.0, weight)
            current = [r for r in results if r.current]
            if all(r.completed for r in results):
                assert current == []
            else:
                assert len(current) == 1
                assert current[0] == next(r for r in results if not r.completed)

    def test_later_milestones_stay_at_zero(self):
        results = evaluate_milestones(make_milestones(195, 190, 185, 180), 200.0, 194.0)
        assert all(r.progress_percentage == 0 and not r.current for r in results[2:])

    def test_monotonic_for_loss_goal(self):
        ms = make_milestones(195, 190, 185, 180)
        previous = [0, 0, 0, 0]
        for weight in (200.0, 198.0, 195.0, 191.0, 187.0, 183.0, 180.0):
            pcts = _pcts(evaluate_milestones(ms, 200.0, weight))
            assert all(a >= b for a, b in zip(pcts, previous))
            previous = pcts

    def test_idempotent(self):
        ms = make_milestones(195, 190, 185, 180)
        assert evaluate_milestones(ms, 200.0, 187.0) == evaluate_milestones(ms, 200.0, 187.0)

    def test_gain_goal(self):
        results = evaluate_milestones(make_milestones(155, 160, 165, 170), 150.0, 162.0)
        assert [r.completed for r in results] == [True, True, False, False]
        assert _pcts(results) == [100, 100, 40, 0]

    def test_wrong_direction_clamped_to_zero(self):
        results = evaluate_milestones(make_milestones(195, 190), 200.0, 205.0)
        assert _pcts(results) == [0, 0]
        assert results[0].current

    def test_skipping_past_marks_all_completed(self):
        results = evaluate_milestones(make_milestones(195, 190, 185), 200.0, 186.0)
        assert [r.completed for r in results] == [True, True, False]
        assert results[2].progress_percentage == 80

    def test_empty(self):
        assert evaluate_milestones([], 200.0, 190.0) == []

    def test_gap_rejected(self):
        ms = make_milestones(195, 190)
        ms[1] = ms[1].model_copy(update={"milestone_number": 3})
        with pytest.raises(InvalidInput):
            evaluate_milestones(ms, 200.0, 190.0)

    def test_unsorted_rejected(self):
        ms = make_milestones(195, 190)
        with pytest.raises(InvalidInput):
            evaluate_milestones([ms[1], ms[0]], 200.0, 190.0)

    def test_non_finite_current_rejected(self):
        with pytest.raises(InvalidInput):
            evaluate_milestones(make_milestones(195), 200.0, float("nan"))


class TestComputeMilestoneProgress:
    def test_uses_latest_log(self):
        goal = make_goal()
        logs = [make_log(187.0, day(20)), make_log(196.0, day(5))]
        snap = compute_milestone_progress(goal, make_milestones(195, 190, 185, 180), logs)
        assert snap.current_weight == 187.0
        assert snap.total_change == 13.0
        assert _pcts(snap.milestones) == [100, 100, 60, 0]
        assert snap.auto_generated is False

    def test_single_log(self):
        goal = make_goal()
        snap = compute_milestone_progress(goal, make_milestones(195, 190), [make_log(195.0, day(3))])
        assert snap.current_weight == 195.0
        assert snap.milestones[0].completed

    def test_no_logs(self):
        assert compute_milestone_progress(make_goal(), make_milestones(195), []) is None

    def test_no_goal(self):
        assert compute_milestone_progress(None, [], [make_log(190.0, day(1))]) is None

    def test_auto_generates_default_count(self):
        snap = compute_milestone_progress(make_goal(), [], [make_log(187.0, day(10))])
        assert snap.auto_generated is True
        assert [m.target for m in snap.milestones] == [195.0, 190.0, 185.0, 180.0]
        assert _pcts(snap.milestones) == [100, 100, 60, 0]

    def test_auto_generate_respects_count(self):
        snap = compute_milestone_progress(
            make_goal(), [], [make_log(195.0, day(10))], default_milestone_count=2
        )
        assert len(snap.milestones) == 2

    def test_gain_goal_snapshot(self):
        goal = make_goal(starting_weight=150.0, target_weight=170.0)
        snap = compute_milestone_progress(goal, [], [make_log(157.5, day(8))])
        assert snap.total_change == -7.5
        assert _pcts(snap.milestones) == [100, 50, 0, 0]
