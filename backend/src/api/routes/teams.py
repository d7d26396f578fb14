"""
Teams API Routes

Team listings, match lists and the analytics endpoints. Every endpoint
requires a valid access token. Out-of-range query values are clamped, not
rejected.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query

from src.api.dependencies import Container, get_container, get_current_user
from src.api.errors import unwrap
from src.application.dtos.dtos import (
    TeamDTO,
    TeamSummaryDTO,
    TeamMatchesDTO,
    MatchListType,
    TeamFormDTO,
    TeamTrendsDTO,
    FixtureDifficultyDTO,
    ErrorResponseDTO,
)
from src.application.use_cases.team_use_cases import (
    GetTeamsUseCase,
    GetTeamSummaryUseCase,
    GetTeamMatchesUseCase,
    GetTeamFormUseCase,
    GetTeamTrendsUseCase,
    GetFixtureDifficultyUseCase,
)
from src.domain.value_objects.value_objects import FixtureDifficultyParams, HomeAwayAdjustment


router = APIRouter(dependencies=[Depends(get_current_user)])
logger = logging.getLogger(__name__)

TEAM_ERRORS = {
    400: {"model": ErrorResponseDTO, "description": "Invalid team id or parameters"},
    401: {"model": ErrorResponseDTO, "description": "Missing or invalid access token"},
    404: {"model": ErrorResponseDTO, "description": "Team not found"},
}


@router.get(
    "",
    response_model=List[TeamDTO],
    summary="List teams",
    description="Returns all teams ordered by popularity rank, then name.",
)
def list_teams(container: Container = Depends(get_container)) -> List[TeamDTO]:
    return unwrap(GetTeamsUseCase(container.team_repository).execute())


@router.get(
    "/{team_id}/summary",
    response_model=TeamSummaryDTO,
    responses=TEAM_ERRORS,
    summary="Team summary",
    description="Team metadata with its last 3 results and next 3 fixtures.",
)
def get_team_summary(
    team_id: int = Path(..., description="Internal team id"),
    container: Container = Depends(get_container),
) -> TeamSummaryDTO:
    use_case = GetTeamSummaryUseCase(container.team_repository, container.match_repository)
    return unwrap(use_case.execute(team_id))


@router.get(
    "/{team_id}/matches",
    response_model=TeamMatchesDTO,
    responses=TEAM_ERRORS,
    summary="Team matches",
)
def get_team_matches(
    team_id: int = Path(..., description="Internal team id"),
    type: MatchListType = Query(MatchListType.ALL, description="all, results or fixtures"),
    limit: Optional[int] = Query(None, description="1-200, default 50"),
    container: Container = Depends(get_container),
) -> TeamMatchesDTO:
    use_case = GetTeamMatchesUseCase(container.team_repository, container.match_repository)
    return unwrap(use_case.execute(team_id, type, limit))


@router.get(
    "/{team_id}/form",
    response_model=TeamFormDTO,
    responses=TEAM_ERRORS,
    summary="Team form",
    description="W/D/L sequence, points, goals and form rating over the latest finished matches.",
)
def get_team_form(
    team_id: int = Path(..., description="Internal team id"),
    matches: Optional[int] = Query(None, description="1-50, default 10"),
    container: Container = Depends(get_container),
) -> TeamFormDTO:
    use_case = GetTeamFormUseCase(container.team_repository, container.match_repository)
    return unwrap(use_case.execute(team_id, matches))


@router.get(
    "/{team_id}/trends",
    response_model=TeamTrendsDTO,
    responses=TEAM_ERRORS,
    summary="Team rolling trends",
)
def get_team_trends(
    team_id: int = Path(..., description="Internal team id"),
    matches: Optional[int] = Query(None, description="5-50, default 20"),
    window: Optional[int] = Query(None, description="2-10, default 5; must not exceed matches"),
    container: Container = Depends(get_container),
) -> TeamTrendsDTO:
    use_case = GetTeamTrendsUseCase(container.team_repository, container.match_repository)
    return unwrap(use_case.execute(team_id, matches, window))


@router.get(
    "/{team_id}/fixture-difficulty",
    response_model=FixtureDifficultyDTO,
    responses=TEAM_ERRORS,
    summary="Upcoming fixture difficulty",
)
def get_fixture_difficulty(
    team_id: int = Path(..., description="Internal team id"),
    fixtures: Optional[int] = Query(None, description="Fixtures to rate, 1-10, default 3"),
    baseline_matches: Optional[int] = Query(None, description="Opponent baseline matches, 5-50, default 10"),
    recent_matches: Optional[int] = Query(None, description="Opponent recent matches, 3-10, default 5"),
    alpha: Optional[float] = Query(None, description="Momentum weight, 0-1, default 0.5"),
    home_away: bool = Query(True, description="Apply venue factors"),
    home_factor: Optional[float] = Query(None, description="0.8-1.2, default 0.95"),
    away_factor: Optional[float] = Query(None, description="0.8-1.2, default 1.05"),
    container: Container = Depends(get_container),
) -> FixtureDifficultyDTO:
    params = FixtureDifficultyParams.clamped(
        fixture_count=fixtures,
        opponent_baseline_matches=baseline_matches,
        opponent_recent_matches=recent_matches,
        alpha=alpha,
        home_away=HomeAwayAdjustment.clamped(home_away, home_factor, away_factor),
    )
    use_case = GetFixtureDifficultyUseCase(container.team_repository, container.match_repository)
    return unwrap(use_case.execute(team_id, params))
