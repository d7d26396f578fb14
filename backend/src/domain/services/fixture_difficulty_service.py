"""
Fixture Difficulty Domain Service

Rates a team's next fixtures by the strength of each opponent, blending the
opponent's baseline PPG with its recent momentum and adjusting for venue.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from src.domain.entities.entities import (
    Match,
    Venue,
    FixtureDifficultyItem,
    FixtureDifficultyReport,
)
from src.domain.repositories.repositories import MatchRepository
from src.domain.services.form_service import FormService
from src.domain.value_objects.value_objects import FixtureDifficultyParams


logger = logging.getLogger(__name__)

EASY_THRESHOLD = 1.20
MEDIUM_THRESHOLD = 1.55


@dataclass(frozen=True)
class OpponentForm:
    baseline_ppg: float
    recent_ppg: float

    @property
    def delta_ppg(self) -> float:
        return self.recent_ppg - self.baseline_ppg


class FixtureDifficultyService:
    """
    Estimates how hard a team's upcoming run of fixtures is.

    Opponent PPG is memoised per ``estimate`` call only; nothing is shared
    between calls.
    """

    def __init__(self, match_repository: MatchRepository):
        self.match_repository = match_repository

    @staticmethod
    def difficulty_label(score: float) -> str:
        if score < EASY_THRESHOLD:
            return "Easy"
        if score < MEDIUM_THRESHOLD:
            return "Medium"
        return "Hard"

    def opponent_form(self, opponent_id: int, params: FixtureDifficultyParams) -> OpponentForm:
        """Baseline and recent PPG of an opponent, from the opponent's perspective."""
        baseline = self.match_repository.recent_finished_matches(opponent_id, params.opponent_baseline_matches)
        recent = self.match_repository.recent_finished_matches(opponent_id, params.opponent_recent_matches)
        return OpponentForm(
            baseline_ppg=FormService.points_per_game(baseline, opponent_id),
            recent_ppg=FormService.points_per_game(recent, opponent_id),
        )

    def rate_fixture(
        self,
        fixture: Match,
        team_id: int,
        opponent: OpponentForm,
        params: FixtureDifficultyParams,
    ) -> FixtureDifficultyItem:
        venue = fixture.venue_for(team_id)
        opponent_id = fixture.opponent_of(team_id)

        strength = opponent.baseline_ppg + params.alpha * opponent.delta_ppg
        factor = params.home_away.factor_for_home(venue is Venue.HOME)
        score = round(strength * factor, 2)

        return FixtureDifficultyItem(
            fixture_id=fixture.id,
            start_time=fixture.start_time,
            venue=venue,
            opponent_id=opponent_id,
            opponent_name=self._opponent_name(fixture, venue),
            opponent_baseline_ppg=opponent.baseline_ppg,
            opponent_recent_ppg=opponent.recent_ppg,
            delta_ppg=opponent.delta_ppg,
            opponent_strength=strength,
            difficulty_score=score,
            difficulty_label=self.difficulty_label(score),
        )

    def estimate(self, team_id: int, params: Optional[FixtureDifficultyParams] = None) -> FixtureDifficultyReport:
        """
        Rate the next ``params.fixture_count`` fixtures of a team.

        Args:
            team_id: External id of the team
            params: Clamped parameters (defaults when omitted)

        Returns:
            FixtureDifficultyReport with items soonest first and the mean run score
        """
        params = params or FixtureDifficultyParams()
        fixtures = self.match_repository.upcoming_fixtures(team_id, params.fixture_count)

        cache: Dict[int, OpponentForm] = {}
        items = []
        for fixture in fixtures[:params.fixture_count]:
            opponent_id = fixture.opponent_of(team_id)
            if opponent_id not in cache:
                cache[opponent_id] = self.opponent_form(opponent_id, params)
            items.append(self.rate_fixture(fixture, team_id, cache[opponent_id], params))

        report = FixtureDifficultyReport(items=items)
        if items:
            report.run_score = round(sum(i.difficulty_score for i in items) / len(items), 2)
            report.run_label = self.difficulty_label(report.run_score)

        logger.debug(f"Rated {len(items)} fixtures for team {team_id} ({len(cache)} opponents)")
        return report

    @staticmethod
    def _opponent_name(fixture: Match, venue: Venue) -> Optional[str]:
        opponent = fixture.away_team if venue is Venue.HOME else fixture.home_team
        return opponent.name if opponent else None
