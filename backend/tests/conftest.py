"""
Shared fixtures: domain match builders, a file-backed SQLite database and
an API client wired to it.
"""

from datetime import datetime, timedelta
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from src.api.main import create_app
from src.core.config import Settings
from src.domain.entities.entities import Match, MatchWinner
from src.infrastructure.database.database_service import DatabaseService
from src.infrastructure.database.models import MatchModel, TeamModel


BASE_TIME = datetime(2025, 1, 1, 15, 0)
TEAM_ID = 1


@pytest.fixture
def make_match():
    """Build finished domain matches for ``TEAM_ID`` against opponent 2."""
    counter = {"id": 0}

    def _make(
        goals_for: Optional[float],
        goals_against: Optional[float],
        home: bool = True,
        day: int = 0,
        ended: bool = True,
        team_id: int = TEAM_ID,
        opponent_id: int = 2,
    ) -> Match:
        counter["id"] += 1
        home_score = goals_for if home else goals_against
        away_score = goals_against if home else goals_for
        if home_score is None or away_score is None:
            winner = MatchWinner.UNKNOWN
        elif home_score > away_score:
            winner = MatchWinner.HOME
        elif home_score < away_score:
            winner = MatchWinner.AWAY
        else:
            winner = MatchWinner.DRAW
        return Match(
            id=counter["id"],
            start_time=BASE_TIME + timedelta(days=day),
            home_team_id=team_id if home else opponent_id,
            away_team_id=opponent_id if home else team_id,
            home_score=home_score,
            away_score=away_score,
            winner=winner,
            ended=ended,
        )

    return _make


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        jwt_access_secret="test-secret",
        bcrypt_rounds=4,
        environment="test",
    )


@pytest.fixture
def db_service(settings):
    service = DatabaseService(settings.database_url)
    service.create_tables()
    yield service
    service.dispose()


@pytest.fixture
def seed(db_service):
    """Insert teams and matches straight into the store."""

    class Seeder:
        def __init__(self):
            self._game_id = 1000

        def team(self, external_id: int, name: str, popularity_rank: Optional[int] = None) -> int:
            session = db_service.get_session()
            try:
                row = TeamModel(external_team_id=external_id, name=name, popularity_rank=popularity_rank)
                session.add(row)
                session.commit()
                return row.id
            finally:
                session.close()

        def match(
            self,
            home: int,
            away: int,
            start_time: datetime,
            home_score=None,
            away_score=None,
            status: str = "Ended",
            winner: Optional[int] = None,
        ) -> int:
            if winner is None and status.lower() == "ended" and home_score is not None and away_score is not None:
                winner = 1 if home_score > away_score else 2 if home_score < away_score else 0
            self._game_id += 1
            session = db_service.get_session()
            try:
                row = MatchModel(
                    external_game_id=self._game_id,
                    start_time=start_time,
                    status_text=status,
                    home_team_external_id=home,
                    away_team_external_id=away,
                    home_score=home_score,
                    away_score=away_score,
                    winner=winner,
                )
                session.add(row)
                session.commit()
                return row.id
            finally:
                session.close()

    return Seeder()


@pytest.fixture
def app(settings, db_service):
    return create_app(settings)


@pytest.fixture
def client(app):
    """Create test client."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    """Register a user and return its Authorization header."""
    response = client.post("/api/auth/register", json={"email": "fan@example.com", "password": "correct-horse"})
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
