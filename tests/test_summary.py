"""Tests for the per-goal dashboard summary."""

import pytest

from app.fitness.summary import required_weekly_rate, summarize_goal, weight_trend
from tests.conftest import day, make_goal, make_log


class TestWeightTrend:
    def test_loss_goal_going_down_is_good(self):
        trend = weight_trend([make_log(195.0, day(1)), make_log(193.0, day(8))], 200.0, 180.0)
        assert trend.change == -2.0
        assert trend.direction == "down"
        assert trend.is_good_trend

    def test_loss_goal_going_up_is_bad(self):
        trend = weight_trend([make_log(193.0, day(1)), make_log(194.0, day(8))], 200.0, 180.0)
        assert trend.direction == "up"
        assert not trend.is_good_trend

    def test_gain_goal_going_up_is_good(self):
        trend = weight_trend([make_log(155.0, day(1)), make_log(157.0, day(8))], 150.0, 170.0)
        assert trend.is_good_trend

    def test_stable(self):
        trend = weight_trend([make_log(190.0, day(1)), make_log(190.0, day(8))], 200.0, 180.0)
        assert trend.direction == "stable"
        assert not trend.is_good_trend

    def test_single_log(self):
        assert weight_trend([make_log(190.0, day(1))], 200.0, 180.0) is None


class TestRequiredWeeklyRate:
    def test_rate(self):
        assert required_weekly_rate(10.0, 35) == pytest.approx(2.0)

    def test_deadline_passed(self):
        assert required_weekly_rate(10.0, 0) is None


class TestSummarizeGoal:
    def test_summary(self):
        goal = make_goal(deadline=day(100))
        logs = [make_log(192.0, day(20)), make_log(190.0, day(30))]
        summary = summarize_goal(goal, logs, today=day(30))
        assert summary.current_weight == 190.0
        assert summary.weight_change == 10.0
        assert summary.remaining_weight == 10.0
        assert summary.progress_percent == 50.0
        assert summary.time_remaining.days == 70
        assert summary.trend.direction == "down"
        assert summary.required_weekly_rate == pytest.approx(1.0)

    def test_past_deadline_has_no_rate(self):
        goal = make_goal(deadline=day(10))
        summary = summarize_goal(goal, [make_log(190.0, day(20))], today=day(30))
        assert summary.time_remaining.days == 0
        assert summary.required_weekly_rate is None
        assert summary.trend is None

    def test_no_logs(self):
        assert summarize_goal(make_goal(), [], today=day(1)) is None

    def test_no_goal(self):
        assert summarize_goal(None, [make_log(190.0, day(1))]) is None
