"""
Form Domain Service

Reduces a team's latest finished matches into a W/D/L sequence, points,
goal stats and a recent-vs-baseline form rating.
"""

import math
from typing import List, Optional, Sequence

from src.domain.entities.entities import (
    Match,
    MatchResult,
    MatchWinner,
    PerspectiveResult,
    FormRating,
    FormSnapshot,
)


RECENT_WINDOW = 5
BASELINE_WINDOW = 10

# (lower bound, label), checked in order; the bound is inclusive.
FORM_LABELS = [
    (0.40, "Strong form"),
    (0.15, "Good form"),
]
# (exclusive lower bound, label)
WEAK_FORM_LABELS = [
    (-0.15, "Average form"),
    (-0.40, "Poor form"),
]
BAD_FORM_LABEL = "Bad form"

STABLE_VOLATILITY = 0.60
MODERATE_VOLATILITY = 1.10


class FormService:
    """
    Service responsible for per-team form metrics.

    Every method is a pure function of the matches it is given.
    """

    @staticmethod
    def perspective_result(match: Match, team_id: int) -> PerspectiveResult:
        """
        Express a match relative to ``team_id``.

        Home/away is decided by comparing ids. Missing scores count as 0 goals.
        """
        is_home = match.home_team_id == team_id
        own = match.home_score if is_home else match.away_score
        other = match.away_score if is_home else match.home_score

        if not match.ended or match.winner is MatchWinner.UNKNOWN:
            result = MatchResult.UNKNOWN
        elif match.winner is MatchWinner.DRAW:
            result = MatchResult.DRAW
        elif match.winner is MatchWinner.HOME:
            result = MatchResult.WIN if is_home else MatchResult.LOSS
        else:
            result = MatchResult.LOSS if is_home else MatchResult.WIN

        return PerspectiveResult(
            result=result,
            goals_for=own or 0.0,
            goals_against=other or 0.0,
            goals_against_known=other is not None,
        )

    @staticmethod
    def points_per_game(matches: Sequence[Match], team_id: int) -> float:
        """
        Points per counted match for ``team_id``.

        Matches whose result cannot be determined are left out of the
        denominator. Returns 0.0 when nothing is counted.
        """
        points = 0
        counted = 0
        for match in matches:
            perspective = FormService.perspective_result(match, team_id)
            if not perspective.result.is_known:
                continue
            counted += 1
            points += perspective.points
        return points / counted if counted else 0.0

    @staticmethod
    def calculate_form(matches: Sequence[Match], team_id: int) -> FormSnapshot:
        """
        Calculate the form snapshot of a team.

        Args:
            matches: Finished matches of the team, newest first
            team_id: External id of the team

        Returns:
            FormSnapshot; an all-zero snapshot without rating when there are no matches
        """
        if not matches:
            return FormSnapshot()

        perspectives = [FormService.perspective_result(m, team_id) for m in matches]
        known = [p for p in perspectives if p.result.is_known]

        total_points = sum(p.points for p in known)
        goals_for = sum(p.goals_for for p in perspectives)
        goals_against = sum(p.goals_against for p in perspectives)
        clean_sheets = sum(1 for p in perspectives if p.goals_against_known and p.goals_against == 0)

        n = len(known) or len(perspectives)
        ppg = total_points / n

        return FormSnapshot(
            matches_used=len(matches),
            sequence=[p.result for p in known],
            total_points=total_points,
            ppg=ppg,
            goals_for=goals_for,
            goals_against=goals_against,
            clean_sheets=clean_sheets,
            avg_goals_for=goals_for / n,
            avg_goals_against=goals_against / n,
            rating=FormService.calculate_rating(known, ppg),
        )

    @staticmethod
    def calculate_rating(perspectives: List[PerspectiveResult], overall_ppg: float) -> Optional[FormRating]:
        """
        Compare the newest matches against the ones just before them.

        Args:
            perspectives: Counted results, newest first
            overall_ppg: PPG over all counted results, used as baseline
                when there is nothing older than the recent window
        """
        n = len(perspectives)
        if n == 0:
            return None

        recent_n = min(RECENT_WINDOW, n)
        baseline_n = min(BASELINE_WINDOW, n - recent_n)
        recent = perspectives[:recent_n]
        baseline = perspectives[recent_n:recent_n + baseline_n]

        recent_points = [p.points for p in recent]
        recent_ppg = sum(recent_points) / recent_n
        recent_gd = sum(p.goals_diff for p in recent) / recent_n

        if baseline_n:
            baseline_ppg = sum(p.points for p in baseline) / baseline_n
            baseline_gd = sum(p.goals_diff for p in baseline) / baseline_n
        else:
            baseline_ppg = overall_ppg
            baseline_gd = sum(p.goals_diff for p in perspectives) / n

        delta_ppg = recent_ppg - baseline_ppg
        delta_gd = recent_gd - baseline_gd
        volatility = FormService._population_std(recent_points)

        return FormRating(
            recent_ppg=recent_ppg,
            baseline_ppg=baseline_ppg,
            delta_ppg=delta_ppg,
            label=FormService.form_label(delta_ppg),
            volatility=volatility,
            volatility_label=FormService.volatility_label(volatility),
            confirmation=FormService.confirmation_signal(delta_ppg, delta_gd),
        )

    @staticmethod
    def form_label(delta_ppg: float) -> str:
        for bound, label in FORM_LABELS:
            if delta_ppg >= bound:
                return label
        for bound, label in WEAK_FORM_LABELS:
            if delta_ppg > bound:
                return label
        return BAD_FORM_LABEL

    @staticmethod
    def volatility_label(volatility: float) -> str:
        if volatility < STABLE_VOLATILITY:
            return "Stable"
        if volatility < MODERATE_VOLATILITY:
            return "Moderate"
        return "High"

    @staticmethod
    def confirmation_signal(delta_ppg: float, delta_goals_diff: float) -> str:
        """Whether the goal difference trend backs up the points trend."""
        if delta_ppg > 0 and delta_goals_diff > 0:
            return "Performance-backed"
        if delta_ppg > 0 and delta_goals_diff < 0:
            return "Results > performance"
        if delta_ppg < 0 and delta_goals_diff < 0:
            return "Consistently struggling"
        return "Mixed"

    @staticmethod
    def _population_std(values: List[int]) -> float:
        mean = sum(values) / len(values)
        return math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))
