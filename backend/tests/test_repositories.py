"""
Tests for the SQL repositories and score parsing.
"""

import math
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from src.domain.entities.entities import MatchWinner
from src.infrastructure.repositories.match_repository import (
    SqlTeamRepository,
    SqlMatchRepository,
    parse_score,
)
from src.infrastructure.repositories.user_repository import SqlUserRepository


KICKOFF = datetime(2025, 2, 1, 15, 0)


class TestParseScore:
    """parse_score never raises."""

    @pytest.mark.parametrize("raw,expected", [
        (2, 2.0),
        (0, 0.0),
        ("3", 3.0),
        (" 1.5 ", 1.5),
        (Decimal("4"), 4.0),
    ])
    def test_numeric_values(self, raw, expected):
        assert parse_score(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", "NaN", float("inf"), -1, "-2", True])
    def test_unusable_values(self, raw):
        assert parse_score(raw) is None

    def test_nan_float(self):
        assert parse_score(math.nan) is None


@pytest.fixture
def league(seed):
    """Three teams and a mix of finished, upcoming and cancelled matches."""
    ids = {
        "arsenal": seed.team(10, "Arsenal", popularity_rank=2),
        "chelsea": seed.team(20, "Chelsea", popularity_rank=1),
        "brentford": seed.team(30, "Brentford"),
    }
    seed.match(10, 20, KICKOFF, 2, 1)
    seed.match(30, 10, KICKOFF + timedelta(days=7), 1, 1)
    seed.match(20, 10, KICKOFF + timedelta(days=14), 0, 3, status="ENDED")
    seed.match(10, 30, KICKOFF + timedelta(days=21), status="Scheduled")
    seed.match(20, 10, KICKOFF + timedelta(days=28), status="Cancelled")
    seed.match(10, 20, KICKOFF + timedelta(days=35), status="Scheduled")
    seed.match(20, 30, KICKOFF + timedelta(days=1), 1, 0)
    return ids


class TestSqlTeamRepository:
    def test_list_orders_by_popularity_then_name(self, db_service, league):
        teams = SqlTeamRepository(db_service).list_teams()
        assert [t.name for t in teams] == ["Chelsea", "Arsenal", "Brentford"]

    def test_get_team_by_id(self, db_service, league):
        repo = SqlTeamRepository(db_service)
        team = repo.get_team_by_id(league["arsenal"])
        assert team.name == "Arsenal"
        assert team.external_team_id == 10
        assert repo.get_team_by_id(9999) is None


class TestSqlMatchRepository:
    def test_recent_finished_newest_first(self, db_service, league):
        matches = SqlMatchRepository(db_service).recent_finished_matches(10, 10)

        assert len(matches) == 3
        assert [m.start_time for m in matches] == sorted((m.start_time for m in matches), reverse=True)
        assert all(m.ended for m in matches)

    def test_finished_status_is_case_insensitive(self, db_service, league):
        newest = SqlMatchRepository(db_service).recent_finished_matches(10, 1)[0]
        assert newest.status_text == "ENDED"
        assert newest.winner is MatchWinner.AWAY
        assert newest.away_score == 3.0

    def test_recent_finished_respects_limit(self, db_service, league):
        assert len(SqlMatchRepository(db_service).recent_finished_matches(10, 2)) == 2

    def test_upcoming_skips_ended_and_cancelled(self, db_service, league):
        fixtures = SqlMatchRepository(db_service).upcoming_fixtures(10, 10)

        assert [f.start_time for f in fixtures] == [
            KICKOFF + timedelta(days=21),
            KICKOFF + timedelta(days=35),
        ]
        assert all(f.winner is MatchWinner.UNKNOWN for f in fixtures)
        assert all(f.home_score is None for f in fixtures)

    def test_team_names_are_joined(self, db_service, league):
        match = SqlMatchRepository(db_service).recent_finished_matches(10, 10)[-1]
        assert match.home_team.name == "Arsenal"
        assert match.away_team.name == "Chelsea"
        assert match.winner is MatchWinner.HOME

    def test_team_matches(self, db_service, league):
        matches = SqlMatchRepository(db_service).team_matches(10, 50)
        assert len(matches) == 6


class TestSqlUserRepository:
    def test_email_is_lowercased(self, db_service):
        repo = SqlUserRepository(db_service)
        user = repo.create_user("Fan@Example.com", "hash")
        assert user.email == "fan@example.com"
        assert repo.get_user_by_email("FAN@example.COM").id == user.id

    def test_update_email_opt_in(self, db_service):
        repo = SqlUserRepository(db_service)
        user = repo.create_user("fan@example.com", "hash")
        settings = repo.update_email_opt_in(user.id, False)
        assert settings.email_opt_in is False
        assert repo.update_email_opt_in(9999, True) is None

    def test_favorites_are_idempotent(self, db_service, league):
        repo = SqlUserRepository(db_service)
        user = repo.create_user("fan@example.com", "hash")

        repo.add_favorite(user.id, league["arsenal"])
        repo.add_favorite(user.id, league["arsenal"])
        favorites = repo.list_favorites(user.id)
        assert [f.team.name for f in favorites] == ["Arsenal"]

        repo.remove_favorite(user.id, league["arsenal"])
        repo.remove_favorite(user.id, league["arsenal"])
        assert repo.list_favorites(user.id) == []
