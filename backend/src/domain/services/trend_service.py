"""
Trend Domain Service

Slides a fixed-size window over a team's chronological match stats.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Sequence

from src.domain.entities.entities import Match, TrendSeries
from src.domain.services.form_service import FormService


@dataclass(frozen=True)
class _MatchStat:
    date: datetime
    points: int
    goals_for: float
    goals_against: float

    @property
    def goals_diff(self) -> float:
        return self.goals_for - self.goals_against


class TrendService:
    """Rolling per-match averages over consecutive windows of matches."""

    @staticmethod
    def calculate_trends(matches: Sequence[Match], team_id: int, window: int) -> TrendSeries:
        """
        Calculate rolling trends.

        Args:
            matches: Finished matches of the team, newest first
            team_id: External id of the team
            window: Matches per window (the caller guarantees window >= 1)

        Returns:
            TrendSeries whose points are labelled with the start time of the
            last match in each window. Empty series when fewer than ``window``
            matches are available.
        """
        if len(matches) < window:
            return TrendSeries(window=window, matches_used=len(matches))

        # Newest -> oldest from the repository, reversed to oldest -> newest
        chronological = list(reversed(matches))
        stats = []
        for match in chronological:
            p = FormService.perspective_result(match, team_id)
            stats.append(_MatchStat(
                date=match.start_time,
                points=p.points,
                goals_for=p.goals_for,
                goals_against=p.goals_against,
            ))

        return TrendSeries(
            window=window,
            matches_used=len(stats),
            labels=[s.date for s in stats[window - 1:]],
            ppg_series=TrendService._rolling_mean(stats, window, lambda s: s.points),
            goals_diff_per_match=TrendService._rolling_mean(stats, window, lambda s: s.goals_diff),
            goals_for_per_match=TrendService._rolling_mean(stats, window, lambda s: s.goals_for),
            goals_against_per_match=TrendService._rolling_mean(stats, window, lambda s: s.goals_against),
        )

    @staticmethod
    def _rolling_mean(
        stats: List[_MatchStat],
        window: int,
        pick: Callable[[_MatchStat], float],
    ) -> List[float]:
        out = []
        for i in range(len(stats) - window + 1):
            total = sum(pick(s) for s in stats[i:i + window])
            out.append(total / window)
        return out
