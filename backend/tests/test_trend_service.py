"""
Unit Tests for Trend Service

Tests rolling window series.
"""

import pytest

from src.domain.services.trend_service import TrendService


TEAM = 1


@pytest.fixture
def six_matches(make_match):
    """Six finished matches, oldest to newest: W L D W W L."""
    scores = [(2, 0), (0, 1), (1, 1), (3, 1), (1, 0), (0, 2)]
    return [make_match(gf, ga, day=i) for i, (gf, ga) in enumerate(scores)]


class TestCalculateTrends:
    """Tests for TrendService.calculate_trends."""

    def test_six_matches_window_five(self, six_matches):
        """Six matches with a window of five give two points."""
        newest_first = list(reversed(six_matches))
        trends = TrendService.calculate_trends(newest_first, TEAM, 5)

        assert trends.matches_used == 6
        assert len(trends.ppg_series) == 2
        assert trends.ppg_series == pytest.approx([2.0, 1.4])
        assert trends.goals_for_per_match == pytest.approx([1.4, 1.0])
        assert trends.goals_against_per_match == pytest.approx([0.6, 1.0])
        assert trends.goals_diff_per_match == pytest.approx([0.8, 0.0])

    def test_labels_are_right_aligned(self, six_matches):
        """Each point is labelled with the last match of its window."""
        trends = TrendService.calculate_trends(list(reversed(six_matches)), TEAM, 5)
        assert trends.labels == [six_matches[4].start_time, six_matches[5].start_time]

    @pytest.mark.parametrize("window", [2, 3, 4, 5, 6])
    def test_series_length(self, six_matches, window):
        trends = TrendService.calculate_trends(list(reversed(six_matches)), TEAM, window)
        expected = len(six_matches) - window + 1
        for series in (
            trends.labels,
            trends.ppg_series,
            trends.goals_diff_per_match,
            trends.goals_for_per_match,
            trends.goals_against_per_match,
        ):
            assert len(series) == expected

    def test_fewer_matches_than_window(self, make_match):
        """Not enough matches is an empty result, not an error."""
        trends = TrendService.calculate_trends([make_match(1, 0), make_match(0, 0)], TEAM, 5)
        assert trends.matches_used == 2
        assert trends.window == 5
        assert trends.ppg_series == []
        assert trends.labels == []
