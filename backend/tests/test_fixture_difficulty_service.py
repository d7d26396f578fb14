"""
Unit Tests for Fixture Difficulty Service

Uses an in-memory match repository so opponent histories can be set up
per test.
"""

from datetime import datetime

import pytest

from src.domain.entities.entities import Match, Venue
from src.domain.repositories.repositories import MatchRepository
from src.domain.services.fixture_difficulty_service import FixtureDifficultyService
from src.domain.value_objects.value_objects import FixtureDifficultyParams, HomeAwayAdjustment


TEAM = 1
OPPONENT = 2


class InMemoryMatchRepository(MatchRepository):
    def __init__(self, finished=None, fixtures=None):
        self.finished = finished or {}
        self.fixtures = fixtures or []
        self.finished_calls = []

    def recent_finished_matches(self, team_id, limit):
        self.finished_calls.append((team_id, limit))
        return self.finished.get(team_id, [])[:limit]

    def upcoming_fixtures(self, team_id, limit):
        return self.fixtures[:limit]

    def team_matches(self, team_id, limit):
        return []


def fixture(match_id: int, home: int, away: int, day: int = 1) -> Match:
    return Match(id=match_id, start_time=datetime(2025, 6, day), home_team_id=home, away_team_id=away)


@pytest.fixture
def opponent_history(make_match):
    """Opponent results newest first: W W W L L L (baseline 1.5, recent-3 3.0)."""
    scores = [(1, 0)] * 3 + [(0, 1)] * 3
    return [
        make_match(gf, ga, day=10 - i, team_id=OPPONENT, opponent_id=9)
        for i, (gf, ga) in enumerate(scores)
    ]


def neutral_params(**kwargs) -> FixtureDifficultyParams:
    return FixtureDifficultyParams.clamped(
        opponent_recent_matches=3,
        alpha=0,
        home_away=HomeAwayAdjustment.clamped(enabled=False),
        **kwargs,
    )


class TestEstimate:
    """Tests for FixtureDifficultyService.estimate."""

    def test_neutral_params_score_equals_baseline(self, opponent_history):
        """With alpha 0 and no venue factors the score is the opponent baseline PPG."""
        repo = InMemoryMatchRepository({OPPONENT: opponent_history}, [fixture(50, TEAM, OPPONENT)])
        report = FixtureDifficultyService(repo).estimate(TEAM, neutral_params())

        item = report.items[0]
        assert item.opponent_baseline_ppg == 1.5
        assert item.opponent_recent_ppg == 3.0
        assert item.difficulty_score == item.opponent_baseline_ppg
        assert item.difficulty_label == "Medium"

    def test_momentum_and_home_factor(self, opponent_history):
        repo = InMemoryMatchRepository({OPPONENT: opponent_history}, [fixture(50, TEAM, OPPONENT)])
        params = FixtureDifficultyParams.clamped(opponent_recent_matches=3)
        item = FixtureDifficultyService(repo).estimate(TEAM, params).items[0]

        assert item.venue is Venue.HOME
        assert item.delta_ppg == 1.5
        assert item.opponent_strength == 2.25
        assert item.difficulty_score == 2.14
        assert item.difficulty_label == "Hard"

    def test_away_factor(self, opponent_history):
        repo = InMemoryMatchRepository({OPPONENT: opponent_history}, [fixture(50, OPPONENT, TEAM)])
        params = FixtureDifficultyParams.clamped(opponent_recent_matches=3)
        item = FixtureDifficultyService(repo).estimate(TEAM, params).items[0]

        assert item.venue is Venue.AWAY
        assert item.opponent_id == OPPONENT
        assert item.difficulty_score == 2.36

    def test_opponent_without_matches(self):
        """An opponent with no finished matches rates as an easy 0."""
        repo = InMemoryMatchRepository({}, [fixture(50, TEAM, OPPONENT)])
        item = FixtureDifficultyService(repo).estimate(TEAM).items[0]

        assert item.opponent_baseline_ppg == 0
        assert item.opponent_recent_ppg == 0
        assert item.difficulty_score == 0
        assert item.difficulty_label == "Easy"

    def test_opponent_form_fetched_once_per_call(self, opponent_history):
        fixtures = [fixture(50, TEAM, OPPONENT, day=1), fixture(51, OPPONENT, TEAM, day=8)]
        repo = InMemoryMatchRepository({OPPONENT: opponent_history}, fixtures)
        report = FixtureDifficultyService(repo).estimate(TEAM, neutral_params())

        assert len(report.items) == 2
        # One baseline and one recent query for the single opponent
        assert len(repo.finished_calls) == 2

    def test_cache_not_shared_between_calls(self, opponent_history):
        repo = InMemoryMatchRepository({OPPONENT: opponent_history}, [fixture(50, TEAM, OPPONENT)])
        service = FixtureDifficultyService(repo)
        service.estimate(TEAM)
        service.estimate(TEAM)
        assert len(repo.finished_calls) == 4

    def test_run_score_is_mean_of_items(self, opponent_history):
        fixtures = [fixture(50, TEAM, OPPONENT, day=1), fixture(51, TEAM, 3, day=8)]
        repo = InMemoryMatchRepository({OPPONENT: opponent_history}, fixtures)
        report = FixtureDifficultyService(repo).estimate(TEAM, neutral_params())

        assert [i.difficulty_score for i in report.items] == [1.5, 0.0]
        assert report.run_score == 0.75
        assert report.run_label == "Easy"

    def test_no_fixtures(self):
        report = FixtureDifficultyService(InMemoryMatchRepository()).estimate(TEAM)
        assert report.items == []
        assert report.run_score is None
        assert report.run_label is None

    def test_fixture_count_limits_items(self, opponent_history):
        fixtures = [fixture(50 + i, TEAM, OPPONENT, day=i + 1) for i in range(5)]
        repo = InMemoryMatchRepository({OPPONENT: opponent_history}, fixtures)
        report = FixtureDifficultyService(repo).estimate(TEAM, FixtureDifficultyParams.clamped(fixture_count=2))
        assert [i.fixture_id for i in report.items] == [50, 51]


class TestDifficultyLabel:
    @pytest.mark.parametrize("score,label", [
        (0.0, "Easy"),
        (1.19, "Easy"),
        (1.20, "Medium"),
        (1.54, "Medium"),
        (1.55, "Hard"),
    ])
    def test_thresholds(self, score, label):
        assert FixtureDifficultyService.difficulty_label(score) == label


class TestParams:
    """Tests for parameter clamping."""

    def test_defaults(self):
        params = FixtureDifficultyParams.clamped()
        assert params.fixture_count == 3
        assert params.opponent_baseline_matches == 10
        assert params.opponent_recent_matches == 5
        assert params.alpha == 0.5
        assert params.home_away.home_factor == 0.95
        assert params.home_away.away_factor == 1.05

    def test_out_of_range_values_are_clamped(self):
        params = FixtureDifficultyParams.clamped(
            fixture_count=99,
            opponent_baseline_matches=1,
            opponent_recent_matches=100,
            alpha=-2,
            home_away=HomeAwayAdjustment.clamped(True, 2.0, 0.1),
        )
        assert params.fixture_count == 10
        assert params.opponent_baseline_matches == 5
        assert params.opponent_recent_matches == 10
        assert params.alpha == 0.0
        assert params.home_away.home_factor == 1.2
        assert params.home_away.away_factor == 0.8

    def test_disabled_adjustment_is_neutral(self):
        adjustment = HomeAwayAdjustment.clamped(enabled=False, home_factor=0.8, away_factor=1.2)
        assert adjustment.factor_for_home(True) == 1.0
        assert adjustment.factor_for_home(False) == 1.0
