"""
Data Transfer Objects (DTOs) Module

DTOs are used to transfer data between layers and to/from the API.
They use Pydantic for validation and serialization. Analytics values are
rounded to 2 decimals when the DTOs are built, never before.
"""

from datetime import datetime
from typing import Optional
from enum import Enum
from pydantic import BaseModel, Field


# ============================================================
# Enums
# ============================================================

class MatchListType(str, Enum):
    """Which matches of a team to list."""
    ALL = "all"
    RESULTS = "results"
    FIXTURES = "fixtures"


# ============================================================
# Request DTOs
# ============================================================

class CredentialsRequestDTO(BaseModel):
    """E-mail and password, used by register and login."""
    email: str = Field(..., min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(..., min_length=8, max_length=128)


class UpdateSettingsRequestDTO(BaseModel):
    email_opt_in: bool


class AddFavoriteRequestDTO(BaseModel):
    team_id: int = Field(..., gt=0)


# ============================================================
# Team & Match DTOs
# ============================================================

class TeamDTO(BaseModel):
    """Team data transfer object."""
    id: int
    external_team_id: int
    name: str
    short_name: Optional[str] = None
    color: Optional[str] = None
    away_color: Optional[str] = None
    image_version: Optional[int] = None


class PerspectiveDTO(BaseModel):
    """Match seen from the requested team."""
    team_is_home: bool
    result: Optional[str] = None  # "W" / "D" / "L", None until ended


class MatchDTO(BaseModel):
    """Match data transfer object."""
    id: int
    external_game_id: Optional[int] = None
    start_time: datetime
    status_text: Optional[str] = None
    ended: bool
    home_team: Optional[TeamDTO] = None
    away_team: Optional[TeamDTO] = None
    home_score: Optional[float] = None
    away_score: Optional[float] = None
    winner: str
    perspective: PerspectiveDTO


class TeamSummaryDTO(BaseModel):
    team: TeamDTO
    last_results: list[MatchDTO] = Field(default_factory=list)
    next_fixtures: list[MatchDTO] = Field(default_factory=list)


class TeamMatchesDTO(BaseModel):
    team: TeamDTO
    type: MatchListType
    limit: int
    matches: list[MatchDTO] = Field(default_factory=list)


# ============================================================
# Analytics DTOs
# ============================================================

class FormRatingDTO(BaseModel):
    recent_ppg: float
    baseline_ppg: float
    delta_ppg: float
    label: str
    volatility: float
    volatility_label: str
    confirmation: str


class TeamFormDTO(BaseModel):
    """Form of a team over its latest finished matches."""
    team_id: int
    matches: int
    sequence: list[str] = Field(default_factory=list)  # newest -> oldest
    total_points: int
    ppg: float = Field(..., ge=0, le=3)
    goals_for: float
    goals_against: float
    goals_diff: float
    clean_sheets: int
    avg_goals_for: float
    avg_goals_against: float
    rating: Optional[FormRatingDTO] = None


class TeamTrendsDTO(BaseModel):
    """Rolling window series; labels mark the last match of each window."""
    team_id: int
    matches: int
    window: int
    labels: list[datetime] = Field(default_factory=list)
    ppg_series: list[float] = Field(default_factory=list)
    goals_diff_per_match: list[float] = Field(default_factory=list)
    goals_for_per_match: list[float] = Field(default_factory=list)
    goals_against_per_match: list[float] = Field(default_factory=list)


class HomeAwayAdjustmentDTO(BaseModel):
    enabled: bool
    home_factor: float
    away_factor: float


class FixtureDifficultyParamsDTO(BaseModel):
    """Parameters actually used, after clamping."""
    fixture_count: int
    opponent_baseline_matches: int
    opponent_recent_matches: int
    alpha: float
    home_away: HomeAwayAdjustmentDTO


class FixtureDifficultyItemDTO(BaseModel):
    fixture_id: int
    start_time: datetime
    venue: str
    opponent_id: int
    opponent_name: Optional[str] = None
    opponent_baseline_ppg: float
    opponent_recent_ppg: float
    delta_ppg: float
    opponent_strength: float
    difficulty_score: float
    difficulty_label: str


class FixtureDifficultyDTO(BaseModel):
    team_id: int
    params: FixtureDifficultyParamsDTO
    items: list[FixtureDifficultyItemDTO] = Field(default_factory=list)
    run_score: Optional[float] = None
    run_label: Optional[str] = None


# ============================================================
# Auth & Account DTOs
# ============================================================

class UserDTO(BaseModel):
    id: int
    email: str
    email_verified: bool = False


class AuthResponseDTO(BaseModel):
    """Returned by register and login; the refresh token travels in a cookie."""
    user: UserDTO
    access_token: str


class AccessTokenResponseDTO(BaseModel):
    access_token: str


class MessageResponseDTO(BaseModel):
    ok: bool = True
    message: Optional[str] = None


class UserSettingsDTO(BaseModel):
    email_verified: bool
    email_opt_in: bool
    time_zone: str


class FavoriteTeamDTO(TeamDTO):
    favorited_at: datetime


class FavoritesResponseDTO(BaseModel):
    favorites: list[FavoriteTeamDTO] = Field(default_factory=list)


# ============================================================
# Service DTOs
# ============================================================

class HealthResponseDTO(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str = "1.0.0"
    database: bool = True
    timestamp: datetime


class ErrorResponseDTO(BaseModel):
    """Error response."""
    error: str
    message: str
    details: Optional[dict] = None
