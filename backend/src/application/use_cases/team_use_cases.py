"""
Team Use Cases Module

Orchestrates team lookups, match listings and the analytics calculators.
Every use case loads the team first, queries matches by the team's external
id and maps the domain result to DTOs, rounding analytics to 2 decimals.
"""

import logging
from typing import Optional, Union

from src.domain.entities.entities import (
    Team,
    Match,
    FormSnapshot,
    TrendSeries,
    FixtureDifficultyReport,
)
from src.domain.repositories.repositories import TeamRepository, MatchRepository
from src.domain.result import Ok, Err, ErrorKind, Result
from src.domain.services.form_service import FormService
from src.domain.services.trend_service import TrendService
from src.domain.services.fixture_difficulty_service import FixtureDifficultyService
from src.domain.value_objects.value_objects import FixtureDifficultyParams, clamp
from src.application.dtos.dtos import (
    TeamDTO,
    MatchDTO,
    PerspectiveDTO,
    MatchListType,
    TeamSummaryDTO,
    TeamMatchesDTO,
    FormRatingDTO,
    TeamFormDTO,
    TeamTrendsDTO,
    HomeAwayAdjustmentDTO,
    FixtureDifficultyParamsDTO,
    FixtureDifficultyItemDTO,
    FixtureDifficultyDTO,
)


logger = logging.getLogger(__name__)

SUMMARY_SIZE = 3

DEFAULT_MATCH_LIMIT = 50
MAX_MATCH_LIMIT = 200
DEFAULT_FORM_MATCHES = 10
MAX_FORM_MATCHES = 50
DEFAULT_TREND_MATCHES = 20
MIN_TREND_MATCHES, MAX_TREND_MATCHES = 5, 50
DEFAULT_TREND_WINDOW = 5
MIN_TREND_WINDOW, MAX_TREND_WINDOW = 2, 10


def _r2(value: float) -> float:
    return round(value, 2)


def map_team_to_dto(team: Team) -> TeamDTO:
    return TeamDTO(
        id=team.id,
        external_team_id=team.external_team_id,
        name=team.name,
        short_name=team.short_name,
        color=team.color,
        away_color=team.away_color,
        image_version=team.image_version,
    )


def map_match_to_dto(match: Match, team_id: int) -> MatchDTO:
    """Convert a domain Match to MatchDTO, seen from ``team_id`` (external id)."""
    perspective = FormService.perspective_result(match, team_id)
    return MatchDTO(
        id=match.id,
        external_game_id=match.external_game_id,
        start_time=match.start_time,
        status_text=match.status_text,
        ended=match.ended,
        home_team=map_team_to_dto(match.home_team) if match.home_team else None,
        away_team=map_team_to_dto(match.away_team) if match.away_team else None,
        home_score=match.home_score,
        away_score=match.away_score,
        winner=match.winner.value,
        perspective=PerspectiveDTO(
            team_is_home=match.home_team_id == team_id,
            result=perspective.result.value if perspective.result.is_known else None,
        ),
    )


def map_form_to_dto(team_id: int, form: FormSnapshot) -> TeamFormDTO:
    rating = None
    if form.rating is not None:
        rating = FormRatingDTO(
            recent_ppg=_r2(form.rating.recent_ppg),
            baseline_ppg=_r2(form.rating.baseline_ppg),
            delta_ppg=_r2(form.rating.delta_ppg),
            label=form.rating.label,
            volatility=_r2(form.rating.volatility),
            volatility_label=form.rating.volatility_label,
            confirmation=form.rating.confirmation,
        )
    return TeamFormDTO(
        team_id=team_id,
        matches=form.matches_used,
        sequence=[r.value for r in form.sequence],
        total_points=form.total_points,
        ppg=_r2(form.ppg),
        goals_for=_r2(form.goals_for),
        goals_against=_r2(form.goals_against),
        goals_diff=_r2(form.goals_diff),
        clean_sheets=form.clean_sheets,
        avg_goals_for=_r2(form.avg_goals_for),
        avg_goals_against=_r2(form.avg_goals_against),
        rating=rating,
    )


def map_trends_to_dto(team_id: int, trends: TrendSeries) -> TeamTrendsDTO:
    return TeamTrendsDTO(
        team_id=team_id,
        matches=trends.matches_used,
        window=trends.window,
        labels=trends.labels,
        ppg_series=[_r2(v) for v in trends.ppg_series],
        goals_diff_per_match=[_r2(v) for v in trends.goals_diff_per_match],
        goals_for_per_match=[_r2(v) for v in trends.goals_for_per_match],
        goals_against_per_match=[_r2(v) for v in trends.goals_against_per_match],
    )


def map_difficulty_to_dto(
    team_id: int,
    params: FixtureDifficultyParams,
    report: FixtureDifficultyReport,
) -> FixtureDifficultyDTO:
    return FixtureDifficultyDTO(
        team_id=team_id,
        params=FixtureDifficultyParamsDTO(
            fixture_count=params.fixture_count,
            opponent_baseline_matches=params.opponent_baseline_matches,
            opponent_recent_matches=params.opponent_recent_matches,
            alpha=params.alpha,
            home_away=HomeAwayAdjustmentDTO(
                enabled=params.home_away.enabled,
                home_factor=params.home_away.home_factor,
                away_factor=params.home_away.away_factor,
            ),
        ),
        items=[
            FixtureDifficultyItemDTO(
                fixture_id=item.fixture_id,
                start_time=item.start_time,
                venue=item.venue.value,
                opponent_id=item.opponent_id,
                opponent_name=item.opponent_name,
                opponent_baseline_ppg=_r2(item.opponent_baseline_ppg),
                opponent_recent_ppg=_r2(item.opponent_recent_ppg),
                delta_ppg=_r2(item.delta_ppg),
                opponent_strength=_r2(item.opponent_strength),
                difficulty_score=item.difficulty_score,
                difficulty_label=item.difficulty_label,
            )
            for item in report.items
        ],
        run_score=report.run_score,
        run_label=report.run_label,
    )


def load_team(team_repository: TeamRepository, team_id: int) -> Union[Team, Err]:
    """Fetch a team by internal id, or the Err to return."""
    if team_id <= 0:
        return Err(ErrorKind.INVALID_INPUT, "Invalid team id")
    team = team_repository.get_team_by_id(team_id)
    if team is None:
        return Err(ErrorKind.NOT_FOUND, "Team not found")
    return team


class GetTeamsUseCase:
    """Use case for listing all teams, most popular first."""

    def __init__(self, team_repository: TeamRepository):
        self.team_repository = team_repository

    def execute(self) -> Result[list[TeamDTO]]:
        return Ok([map_team_to_dto(t) for t in self.team_repository.list_teams()])


class GetTeamSummaryUseCase:
    """Use case for a team's last results and next fixtures."""

    def __init__(self, team_repository: TeamRepository, match_repository: MatchRepository):
        self.team_repository = team_repository
        self.match_repository = match_repository

    def execute(self, team_id: int) -> Result[TeamSummaryDTO]:
        team = load_team(self.team_repository, team_id)
        if isinstance(team, Err):
            return team

        ext_id = team.external_team_id
        last_results = self.match_repository.recent_finished_matches(ext_id, SUMMARY_SIZE)
        next_fixtures = self.match_repository.upcoming_fixtures(ext_id, SUMMARY_SIZE)

        return Ok(TeamSummaryDTO(
            team=map_team_to_dto(team),
            last_results=[map_match_to_dto(m, ext_id) for m in last_results],
            next_fixtures=[map_match_to_dto(m, ext_id) for m in next_fixtures],
        ))


class GetTeamMatchesUseCase:
    """Use case for listing a team's matches filtered by type."""

    def __init__(self, team_repository: TeamRepository, match_repository: MatchRepository):
        self.team_repository = team_repository
        self.match_repository = match_repository

    def execute(
        self,
        team_id: int,
        match_type: MatchListType = MatchListType.ALL,
        limit: Optional[int] = None,
    ) -> Result[TeamMatchesDTO]:
        team = load_team(self.team_repository, team_id)
        if isinstance(team, Err):
            return team

        limit = int(clamp(limit if limit is not None else DEFAULT_MATCH_LIMIT, 1, MAX_MATCH_LIMIT))
        ext_id = team.external_team_id

        if match_type is MatchListType.RESULTS:
            matches = self.match_repository.recent_finished_matches(ext_id, limit)
        elif match_type is MatchListType.FIXTURES:
            matches = self.match_repository.upcoming_fixtures(ext_id, limit)
        else:
            matches = self.match_repository.team_matches(ext_id, limit)

        return Ok(TeamMatchesDTO(
            team=map_team_to_dto(team),
            type=match_type,
            limit=limit,
            matches=[map_match_to_dto(m, ext_id) for m in matches],
        ))


class GetTeamFormUseCase:
    """Use case for a team's form over its latest finished matches."""

    def __init__(self, team_repository: TeamRepository, match_repository: MatchRepository):
        self.team_repository = team_repository
        self.match_repository = match_repository

    def execute(self, team_id: int, matches: Optional[int] = None) -> Result[TeamFormDTO]:
        team = load_team(self.team_repository, team_id)
        if isinstance(team, Err):
            return team

        n = int(clamp(matches if matches is not None else DEFAULT_FORM_MATCHES, 1, MAX_FORM_MATCHES))
        recent = self.match_repository.recent_finished_matches(team.external_team_id, n)
        form = FormService.calculate_form(recent, team.external_team_id)
        return Ok(map_form_to_dto(team.id, form))


class GetTeamTrendsUseCase:
    """Use case for rolling trends over a team's latest finished matches."""

    def __init__(self, team_repository: TeamRepository, match_repository: MatchRepository):
        self.team_repository = team_repository
        self.match_repository = match_repository

    def execute(
        self,
        team_id: int,
        matches: Optional[int] = None,
        window: Optional[int] = None,
    ) -> Result[TeamTrendsDTO]:
        team = load_team(self.team_repository, team_id)
        if isinstance(team, Err):
            return team

        n = int(clamp(matches if matches is not None else DEFAULT_TREND_MATCHES, MIN_TREND_MATCHES, MAX_TREND_MATCHES))
        w = int(clamp(window if window is not None else DEFAULT_TREND_WINDOW, MIN_TREND_WINDOW, MAX_TREND_WINDOW))
        if w > n:
            return Err(ErrorKind.INVALID_INPUT, "window must be <= matches")

        recent = self.match_repository.recent_finished_matches(team.external_team_id, n)
        trends = TrendService.calculate_trends(recent, team.external_team_id, w)
        return Ok(map_trends_to_dto(team.id, trends))


class GetFixtureDifficultyUseCase:
    """Use case for the difficulty of a team's upcoming fixtures."""

    def __init__(self, team_repository: TeamRepository, match_repository: MatchRepository):
        self.team_repository = team_repository
        self.difficulty_service = FixtureDifficultyService(match_repository)

    def execute(self, team_id: int, params: Optional[FixtureDifficultyParams] = None) -> Result[FixtureDifficultyDTO]:
        team = load_team(self.team_repository, team_id)
        if isinstance(team, Err):
            return team

        params = params or FixtureDifficultyParams()
        report = self.difficulty_service.estimate(team.external_team_id, params)
        return Ok(map_difficulty_to_dto(team.id, params, report))
