"""
SQL repositories for teams and matches.

Stored scores are parsed into numbers here, so the domain layer only ever
sees ``float`` or ``None``.
"""

import logging
import math
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from sqlalchemy import func, or_, and_
from sqlalchemy.orm import aliased

from src.domain.entities.entities import Match, MatchWinner, Team
from src.domain.repositories.repositories import MatchRepository, TeamRepository
from src.infrastructure.database.database_service import DatabaseService
from src.infrastructure.database.models import MatchModel, TeamModel


logger = logging.getLogger(__name__)

ENDED_STATUS = "ended"
CANCELLED_STATUSES = ("cancelled", "canceled", "abandoned")

WINNER_CODES = {
    1: MatchWinner.HOME,
    2: MatchWinner.AWAY,
    0: MatchWinner.DRAW,
}


def parse_score(raw: Any) -> Optional[float]:
    """
    Convert a stored score into a number.

    Never raises: None, non-numeric, non-finite and negative values give None.
    """
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(Decimal(str(raw).strip()))
    except (InvalidOperation, ValueError):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def _status_expr():
    return func.lower(func.coalesce(MatchModel.status_text, MatchModel.short_status_text, ""))


def _is_ended(status_text: Optional[str], short_status_text: Optional[str]) -> bool:
    return (status_text or short_status_text or "").lower() == ENDED_STATUS


def to_team_entity(row: Optional[TeamModel]) -> Optional[Team]:
    if row is None:
        return None
    return Team(
        id=row.id,
        external_team_id=row.external_team_id,
        name=row.name,
        short_name=row.short_name,
        color=row.color,
        away_color=row.away_color,
        image_version=row.image_version,
    )


def _to_match(row: MatchModel, home: Optional[TeamModel] = None, away: Optional[TeamModel] = None) -> Match:
    ended = _is_ended(row.status_text, row.short_status_text)
    winner = WINNER_CODES.get(row.winner, MatchWinner.UNKNOWN) if ended else MatchWinner.UNKNOWN
    return Match(
        id=row.id,
        external_game_id=row.external_game_id,
        competition_id=row.competition_id,
        start_time=row.start_time,
        status_text=row.status_text or row.short_status_text,
        home_team_id=row.home_team_external_id,
        away_team_id=row.away_team_external_id,
        home_score=parse_score(row.home_score),
        away_score=parse_score(row.away_score),
        winner=winner,
        ended=ended,
        home_team=to_team_entity(home),
        away_team=to_team_entity(away),
    )


class SqlTeamRepository(TeamRepository):
    """Team repository backed by the ``teams`` table."""

    def __init__(self, db_service: DatabaseService):
        self.db_service = db_service

    def list_teams(self) -> list[Team]:
        session = self.db_service.get_session()
        try:
            rows = session.query(TeamModel).order_by(
                func.coalesce(TeamModel.popularity_rank, 999999999).asc(),
                TeamModel.name.asc(),
            ).all()
            return [to_team_entity(r) for r in rows]
        finally:
            session.close()

    def get_team_by_id(self, team_id: int) -> Optional[Team]:
        session = self.db_service.get_session()
        try:
            return to_team_entity(session.get(TeamModel, team_id))
        finally:
            session.close()


class SqlMatchRepository(MatchRepository):
    """Match repository backed by the ``matches`` table, joined to ``teams`` on external ids."""

    def __init__(self, db_service: DatabaseService):
        self.db_service = db_service

    def _query_team_matches(self, team_id: int, extra_filter, order_by, limit: int) -> list[Match]:
        session = self.db_service.get_session()
        try:
            home = aliased(TeamModel)
            away = aliased(TeamModel)
            query = (
                session.query(MatchModel, home, away)
                .outerjoin(home, home.external_team_id == MatchModel.home_team_external_id)
                .outerjoin(away, away.external_team_id == MatchModel.away_team_external_id)
                .filter(or_(
                    MatchModel.home_team_external_id == team_id,
                    MatchModel.away_team_external_id == team_id,
                ))
            )
            if extra_filter is not None:
                query = query.filter(extra_filter)
            rows = query.order_by(order_by).limit(limit).all()
            return [_to_match(m, h, a) for m, h, a in rows]
        finally:
            session.close()

    def recent_finished_matches(self, team_id: int, limit: int) -> list[Match]:
        return self._query_team_matches(
            team_id,
            _status_expr() == ENDED_STATUS,
            MatchModel.start_time.desc(),
            limit,
        )

    def upcoming_fixtures(self, team_id: int, limit: int) -> list[Match]:
        status = _status_expr()
        return self._query_team_matches(
            team_id,
            and_(status != ENDED_STATUS, status.notin_(CANCELLED_STATUSES)),
            MatchModel.start_time.asc(),
            limit,
        )

    def team_matches(self, team_id: int, limit: int) -> list[Match]:
        return self._query_team_matches(team_id, None, MatchModel.start_time.desc(), limit)
