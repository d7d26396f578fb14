"""
Unit Tests for Domain Entities

Tests the core domain entities and their validation logic.
"""

import pytest
from datetime import datetime, timedelta

from src.domain.entities.entities import (
    Team,
    Match,
    MatchWinner,
    MatchResult,
    Venue,
    RefreshSession,
)
from src.domain.result import Ok, Err, ErrorKind


class TestTeam:
    """Tests for Team entity."""

    def test_create_team_valid(self):
        """Test creating a valid team."""
        team = Team(id=1, external_team_id=110, name="Arsenal", short_name="ARS")
        assert team.id == 1
        assert team.external_team_id == 110
        assert team.short_name == "ARS"

    def test_team_is_frozen(self):
        """Test that Team is immutable."""
        team = Team(id=1, external_team_id=110, name="Arsenal")
        with pytest.raises(AttributeError):
            team.name = "New Name"

    def test_team_empty_name_raises_error(self):
        """Test that empty name raises ValueError."""
        with pytest.raises(ValueError, match="Team name cannot be empty"):
            Team(id=1, external_team_id=110, name="")


class TestMatch:
    """Tests for Match entity."""

    def _match(self, **kwargs):
        defaults = dict(id=1, start_time=datetime(2025, 1, 1), home_team_id=10, away_team_id=20)
        defaults.update(kwargs)
        return Match(**defaults)

    def test_winner_is_unknown_until_ended(self):
        """A stored winner is ignored while the match is not ended."""
        match = self._match(winner=MatchWinner.HOME, ended=False)
        assert match.winner is MatchWinner.UNKNOWN

    def test_winner_kept_when_ended(self):
        match = self._match(winner=MatchWinner.AWAY, ended=True)
        assert match.winner is MatchWinner.AWAY

    def test_venue_and_opponent(self):
        """Venue and opponent are decided by id comparison."""
        match = self._match()
        assert match.venue_for(10) is Venue.HOME
        assert match.venue_for(20) is Venue.AWAY
        assert match.opponent_of(10) == 20
        assert match.opponent_of(20) == 10
        assert match.involves(10)
        assert not match.involves(30)


class TestMatchResult:
    """Tests for MatchResult points."""

    def test_points(self):
        assert MatchResult.WIN.points == 3
        assert MatchResult.DRAW.points == 1
        assert MatchResult.LOSS.points == 0
        assert MatchResult.UNKNOWN.points == 0

    def test_unknown_is_not_counted(self):
        assert not MatchResult.UNKNOWN.is_known
        assert MatchResult.LOSS.is_known


class TestRefreshSession:
    """Tests for the session state classification."""

    def _session(self, **kwargs):
        now = datetime(2025, 1, 1)
        defaults = dict(
            id=1,
            user_id=1,
            token_hash="abc",
            expires_at=now + timedelta(days=7),
            created_at=now,
        )
        defaults.update(kwargs)
        return RefreshSession(**defaults)

    def test_active_session(self):
        assert self._session().is_active(datetime(2025, 1, 2))

    def test_expired_session(self):
        assert not self._session().is_active(datetime(2025, 1, 9))

    def test_revoked_session(self):
        session = self._session(revoked_at=datetime(2025, 1, 1, 12))
        assert not session.is_active(datetime(2025, 1, 2))


class TestResult:
    """Tests for the tagged result type."""

    def test_ok(self):
        result = Ok(5)
        assert result.is_ok
        assert result.value == 5

    def test_err(self):
        result = Err(ErrorKind.NOT_FOUND, "Team not found")
        assert not result.is_ok
        assert result.kind is ErrorKind.NOT_FOUND
