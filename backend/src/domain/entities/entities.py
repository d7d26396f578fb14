"""
Domain Entities Module

This module contains the core domain entities for the team analytics backend.
These entities represent the core business concepts and are independent of any infrastructure.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from enum import Enum


POINTS_FOR_WIN = 3
POINTS_FOR_DRAW = 1


class MatchWinner(Enum):
    """Stored outcome of a match, independent of any team."""
    HOME = "home"
    AWAY = "away"
    DRAW = "draw"
    UNKNOWN = "unknown"


class MatchResult(Enum):
    """Outcome of a match from one team's perspective."""
    WIN = "W"
    DRAW = "D"
    LOSS = "L"
    UNKNOWN = "U"

    @property
    def points(self) -> int:
        if self is MatchResult.WIN:
            return POINTS_FOR_WIN
        if self is MatchResult.DRAW:
            return POINTS_FOR_DRAW
        return 0

    @property
    def is_known(self) -> bool:
        return self is not MatchResult.UNKNOWN


class Venue(Enum):
    HOME = "home"
    AWAY = "away"


@dataclass(frozen=True)
class Team:
    """
    Represents a team of the tracked competition.

    Attributes:
        id: Internal identifier
        external_team_id: Identifier used by stored matches
        name: Full name of the team
        short_name: Abbreviated name (e.g., "MUN")
        color: Primary kit color
        away_color: Away kit color
        image_version: Crest image revision
    """
    id: int
    external_team_id: int
    name: str
    short_name: Optional[str] = None
    color: Optional[str] = None
    away_color: Optional[str] = None
    image_version: Optional[int] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("Team name cannot be empty")


@dataclass
class Match:
    """
    Represents a match as consumed by the analytics engine.

    Attributes:
        id: Unique identifier for the match
        start_time: Kick-off time (UTC)
        competition_id: Competition the match belongs to
        home_team_id: External id of the home team
        away_team_id: External id of the away team
        home_score: Goals scored by home team (None if unknown)
        away_score: Goals scored by away team (None if unknown)
        winner: Stored winner, UNKNOWN unless the match has ended
        ended: Whether the outcome is final
        status_text: Raw status label from the store
        home_team: Joined home team (if known locally)
        away_team: Joined away team (if known locally)
    """
    id: int
    start_time: datetime
    home_team_id: int
    away_team_id: int
    competition_id: Optional[int] = None
    home_score: Optional[float] = None
    away_score: Optional[float] = None
    winner: MatchWinner = MatchWinner.UNKNOWN
    ended: bool = False
    external_game_id: Optional[int] = None
    status_text: Optional[str] = None
    home_team: Optional[Team] = None
    away_team: Optional[Team] = None

    def __post_init__(self):
        if not self.ended:
            self.winner = MatchWinner.UNKNOWN

    def involves(self, team_id: int) -> bool:
        return team_id in (self.home_team_id, self.away_team_id)

    def venue_for(self, team_id: int) -> Venue:
        """Venue from the given team's point of view, decided by id comparison."""
        return Venue.HOME if self.home_team_id == team_id else Venue.AWAY

    def opponent_of(self, team_id: int) -> int:
        return self.away_team_id if self.home_team_id == team_id else self.home_team_id


@dataclass(frozen=True)
class PerspectiveResult:
    """A match outcome expressed relative to one team."""
    result: MatchResult
    goals_for: float
    goals_against: float
    goals_against_known: bool = True

    @property
    def goals_diff(self) -> float:
        return self.goals_for - self.goals_against

    @property
    def points(self) -> int:
        return self.result.points


@dataclass(frozen=True)
class FormRating:
    """Recent-vs-baseline form comparison."""
    recent_ppg: float
    baseline_ppg: float
    delta_ppg: float
    label: str
    volatility: float
    volatility_label: str
    confirmation: str


@dataclass
class FormSnapshot:
    """Aggregated form of a team over its latest finished matches."""
    matches_used: int = 0
    sequence: list[MatchResult] = field(default_factory=list)
    total_points: int = 0
    ppg: float = 0.0
    goals_for: float = 0.0
    goals_against: float = 0.0
    clean_sheets: int = 0
    avg_goals_for: float = 0.0
    avg_goals_against: float = 0.0
    rating: Optional[FormRating] = None

    @property
    def goals_diff(self) -> float:
        return self.goals_for - self.goals_against


@dataclass
class TrendSeries:
    """Right-aligned rolling averages; every series has the same length."""
    window: int
    matches_used: int = 0
    labels: list[datetime] = field(default_factory=list)
    ppg_series: list[float] = field(default_factory=list)
    goals_diff_per_match: list[float] = field(default_factory=list)
    goals_for_per_match: list[float] = field(default_factory=list)
    goals_against_per_match: list[float] = field(default_factory=list)


@dataclass(frozen=True)
class FixtureDifficultyItem:
    fixture_id: int
    start_time: datetime
    venue: Venue
    opponent_id: int
    opponent_baseline_ppg: float
    opponent_recent_ppg: float
    delta_ppg: float
    opponent_strength: float
    difficulty_score: float
    difficulty_label: str
    opponent_name: Optional[str] = None


@dataclass
class FixtureDifficultyReport:
    """Difficulty of a team's next fixtures plus the aggregate run."""
    items: list[FixtureDifficultyItem] = field(default_factory=list)
    run_score: Optional[float] = None
    run_label: Optional[str] = None


@dataclass(frozen=True)
class User:
    id: int
    email: str
    password_hash: str
    email_verified: bool = False
    email_opt_in: bool = True
    time_zone: str = "America/New_York"
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class UserSettings:
    email_verified: bool
    email_opt_in: bool
    time_zone: str


@dataclass(frozen=True)
class FavoriteTeam:
    team: Team
    favorited_at: datetime


@dataclass(frozen=True)
class RefreshSession:
    """
    A server-tracked refresh credential. Only the token hash is stored.

    A session is active while it is neither revoked nor past its expiry.
    """
    id: int
    user_id: int
    token_hash: str
    expires_at: datetime
    created_at: datetime
    revoked_at: Optional[datetime] = None

    def is_active(self, now: datetime) -> bool:
        return self.revoked_at is None and self.expires_at > now


@dataclass(frozen=True)
class RotatedSession:
    """Outcome of a successful refresh-token rotation."""
    user_id: int
    raw_token: str
