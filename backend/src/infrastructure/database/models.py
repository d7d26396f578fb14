"""
SQLAlchemy models for the relational store.

Matches reference teams by their external ids, as delivered by the
sports-data provider that fills the table.
"""

from sqlalchemy import (
    Column,
    String,
    DateTime,
    Integer,
    BigInteger,
    Boolean,
    Numeric,
    ForeignKey,
    UniqueConstraint,
)

from src.infrastructure.database.database_service import Base
from src.utils.time_utils import get_utc_now


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    email_verified = Column(Boolean, nullable=False, default=False)
    email_opt_in = Column(Boolean, nullable=False, default=True)
    time_zone = Column(String, nullable=False, default="America/New_York")
    created_at = Column(DateTime, nullable=False, default=get_utc_now)
    updated_at = Column(DateTime, nullable=False, default=get_utc_now, onupdate=get_utc_now)


class TeamModel(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, autoincrement=True)
    external_team_id = Column(BigInteger, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    short_name = Column(String, nullable=True)
    color = Column(String, nullable=True)
    away_color = Column(String, nullable=True)
    image_version = Column(Integer, nullable=True)
    popularity_rank = Column(Integer, nullable=True)


class MatchModel(Base):
    """
    SQLAlchemy model for stored matches.

    winner encoding: 1 = home win, 2 = away win, 0 = draw, NULL = not ended.
    """
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    external_game_id = Column(BigInteger, unique=True, index=True, nullable=False)
    competition_id = Column(Integer, nullable=True)
    start_time = Column(DateTime, index=True, nullable=False)
    status_text = Column(String, nullable=True)
    short_status_text = Column(String, nullable=True)
    status_group = Column(Integer, nullable=True)
    home_team_external_id = Column(BigInteger, index=True, nullable=False)
    away_team_external_id = Column(BigInteger, index=True, nullable=False)
    home_score = Column(Numeric(asdecimal=False), nullable=True)
    away_score = Column(Numeric(asdecimal=False), nullable=True)
    winner = Column(Integer, nullable=True)


class RefreshTokenModel(Base):
    """Hashed refresh sessions. Rows are revoked, never deleted."""
    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    token_hash = Column(String, unique=True, index=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    revoked_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=get_utc_now)


class EmailVerificationTokenModel(Base):
    __tablename__ = "email_verification_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    token_hash = Column(String, unique=True, index=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    used_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=get_utc_now)


class FavoriteTeamModel(Base):
    __tablename__ = "user_favorite_teams"
    __table_args__ = (UniqueConstraint("user_id", "team_id", name="uq_user_favorite_team"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    team_id = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=get_utc_now)
