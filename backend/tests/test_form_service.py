"""
Unit Tests for Form Service

Tests perspective results, PPG and the form rating.
"""

import pytest

from src.domain.entities.entities import MatchResult
from src.domain.services.form_service import FormService


TEAM = 1
OPPONENT = 2


class TestPerspectiveResult:
    """Tests for results seen from one team."""

    def test_home_win(self, make_match):
        p = FormService.perspective_result(make_match(2, 1, home=True), TEAM)
        assert p.result is MatchResult.WIN
        assert p.goals_for == 2
        assert p.goals_against == 1

    def test_away_win(self, make_match):
        p = FormService.perspective_result(make_match(3, 0, home=False), TEAM)
        assert p.result is MatchResult.WIN
        assert p.goals_for == 3
        assert p.goals_against == 0

    def test_opponent_sees_the_loss(self, make_match):
        p = FormService.perspective_result(make_match(3, 0, home=False), OPPONENT)
        assert p.result is MatchResult.LOSS

    def test_missing_scores_count_as_zero(self, make_match):
        p = FormService.perspective_result(make_match(None, None), TEAM)
        assert p.result is MatchResult.UNKNOWN
        assert p.goals_for == 0
        assert p.goals_against == 0
        assert not p.goals_against_known

    def test_not_ended_is_unknown(self, make_match):
        p = FormService.perspective_result(make_match(1, 0, ended=False), TEAM)
        assert p.result is MatchResult.UNKNOWN

    @pytest.mark.parametrize("goals_for,goals_against,expected", [
        (2, 0, 3),
        (0, 2, 3),
        (1, 1, 2),
    ])
    def test_points_are_symmetric(self, make_match, goals_for, goals_against, expected):
        """Both sides together earn 3 points for a decisive result and 2 for a draw."""
        match = make_match(goals_for, goals_against)
        total = (
            FormService.perspective_result(match, TEAM).points
            + FormService.perspective_result(match, OPPONENT).points
        )
        assert total == expected


class TestPointsPerGame:
    """Tests for counted-matches-only PPG."""

    def test_no_matches(self):
        assert FormService.points_per_game([], TEAM) == 0.0

    def test_unknown_results_left_out(self, make_match):
        matches = [make_match(1, 0), make_match(None, None), make_match(1, 1)]
        assert FormService.points_per_game(matches, TEAM) == 2.0

    def test_ppg_bounds(self, make_match):
        """PPG stays within [0, 3]."""
        samples = [
            [make_match(1, 0) for _ in range(4)],
            [make_match(0, 1) for _ in range(4)],
            [make_match(1, 0), make_match(0, 0), make_match(0, 3)],
        ]
        for matches in samples:
            form = FormService.calculate_form(matches, TEAM)
            assert 0 <= form.ppg <= 3
            assert 0 <= FormService.points_per_game(matches, TEAM) <= 3


class TestCalculateForm:
    """Tests for the form snapshot."""

    def test_no_matches(self):
        form = FormService.calculate_form([], TEAM)
        assert form.matches_used == 0
        assert form.sequence == []
        assert form.total_points == 0
        assert form.ppg == 0.0
        assert form.rating is None

    def test_three_matches_win_win_loss(self, make_match):
        """W, W, L newest first gives 6 points and 2.0 PPG."""
        matches = [make_match(2, 0, day=3), make_match(1, 0, day=2), make_match(0, 1, day=1)]
        form = FormService.calculate_form(matches, TEAM)

        assert form.matches_used == 3
        assert form.sequence == [MatchResult.WIN, MatchResult.WIN, MatchResult.LOSS]
        assert form.total_points == 6
        assert form.ppg == 2.0
        assert form.goals_for == 3
        assert form.goals_against == 1
        assert form.goals_diff == 2
        assert form.clean_sheets == 2
        assert form.avg_goals_for == 1.0

    def test_rating_without_baseline_uses_overall_ppg(self, make_match):
        matches = [make_match(2, 0, day=3), make_match(1, 0, day=2), make_match(0, 1, day=1)]
        rating = FormService.calculate_form(matches, TEAM).rating

        assert rating.baseline_ppg == 2.0
        assert rating.delta_ppg == pytest.approx(0.0)
        assert rating.label == "Average form"
        assert rating.volatility_label == "High"

    def test_rating_with_baseline(self, make_match):
        """Five straight wins after a loss is strong, goal-backed form."""
        matches = [make_match(1, 0, day=10 - i) for i in range(5)] + [make_match(0, 1, day=1)]
        rating = FormService.calculate_form(matches, TEAM).rating

        assert rating.recent_ppg == 3.0
        assert rating.baseline_ppg == 0.0
        assert rating.delta_ppg == 3.0
        assert rating.label == "Strong form"
        assert rating.volatility == 0.0
        assert rating.volatility_label == "Stable"
        assert rating.confirmation == "Performance-backed"

    def test_clean_sheets_need_known_score(self, make_match):
        form = FormService.calculate_form([make_match(None, None), make_match(1, 0)], TEAM)
        assert form.clean_sheets == 1


class TestLabels:
    """Tests for label thresholds."""

    @pytest.mark.parametrize("delta,label", [
        (0.40, "Strong form"),
        (0.15, "Good form"),
        (0.0, "Average form"),
        (-0.15, "Poor form"),
        (-0.40, "Bad form"),
    ])
    def test_form_label(self, delta, label):
        assert FormService.form_label(delta) == label

    @pytest.mark.parametrize("volatility,label", [
        (0.0, "Stable"),
        (0.60, "Moderate"),
        (1.10, "High"),
    ])
    def test_volatility_label(self, volatility, label):
        assert FormService.volatility_label(volatility) == label

    @pytest.mark.parametrize("delta_ppg,delta_gd,signal", [
        (0.5, 0.5, "Performance-backed"),
        (0.5, -0.5, "Results > performance"),
        (-0.5, -0.5, "Consistently struggling"),
        (-0.5, 0.5, "Mixed"),
        (0.0, 0.0, "Mixed"),
    ])
    def test_confirmation_signal(self, delta_ppg, delta_gd, signal):
        assert FormService.confirmation_signal(delta_ppg, delta_gd) == signal
