"""
Domain Value Objects Module

Value objects are immutable objects that are defined by their attributes rather than identity.
Request parameters for the analytics calculators are clamped into their safe
ranges here instead of being rejected.
"""

from dataclasses import dataclass, field
from typing import Optional, Union


Number = Union[int, float]


def clamp(value: Number, low: Number, high: Number) -> Number:
    """Clamp ``value`` into ``[low, high]``."""
    return max(low, min(high, value))


@dataclass(frozen=True)
class HomeAwayAdjustment:
    """
    Venue multipliers applied to an opponent's strength.

    Factors are clamped to [0.8, 1.2]. When disabled, both factors act as 1.0.
    """
    enabled: bool = True
    home_factor: float = 0.95
    away_factor: float = 1.05

    MIN_FACTOR = 0.8
    MAX_FACTOR = 1.2

    @classmethod
    def clamped(
        cls,
        enabled: bool = True,
        home_factor: Optional[float] = None,
        away_factor: Optional[float] = None,
    ) -> "HomeAwayAdjustment":
        home = cls.home_factor if home_factor is None else home_factor
        away = cls.away_factor if away_factor is None else away_factor
        return cls(
            enabled=enabled,
            home_factor=clamp(float(home), cls.MIN_FACTOR, cls.MAX_FACTOR),
            away_factor=clamp(float(away), cls.MIN_FACTOR, cls.MAX_FACTOR),
        )

    def factor_for_home(self, is_home: bool) -> float:
        if not self.enabled:
            return 1.0
        return self.home_factor if is_home else self.away_factor


@dataclass(frozen=True)
class FixtureDifficultyParams:
    """
    Parameters of the fixture difficulty estimate.

    Attributes:
        fixture_count: Upcoming fixtures to rate (1-10)
        opponent_baseline_matches: Finished matches used for the opponent baseline PPG (5-50)
        opponent_recent_matches: Finished matches used for the opponent recent PPG (3-10)
        alpha: Weight of the opponent's momentum (recent - baseline), 0-1
        home_away: Venue adjustment
    """
    fixture_count: int = 3
    opponent_baseline_matches: int = 10
    opponent_recent_matches: int = 5
    alpha: float = 0.5
    home_away: HomeAwayAdjustment = field(default_factory=HomeAwayAdjustment)

    @classmethod
    def clamped(
        cls,
        fixture_count: Optional[int] = None,
        opponent_baseline_matches: Optional[int] = None,
        opponent_recent_matches: Optional[int] = None,
        alpha: Optional[float] = None,
        home_away: Optional[HomeAwayAdjustment] = None,
    ) -> "FixtureDifficultyParams":
        """Build parameters, replacing missing values with defaults and clamping the rest."""
        return cls(
            fixture_count=int(clamp(cls.fixture_count if fixture_count is None else fixture_count, 1, 10)),
            opponent_baseline_matches=int(clamp(
                cls.opponent_baseline_matches if opponent_baseline_matches is None else opponent_baseline_matches,
                5, 50,
            )),
            opponent_recent_matches=int(clamp(
                cls.opponent_recent_matches if opponent_recent_matches is None else opponent_recent_matches,
                3, 10,
            )),
            alpha=float(clamp(cls.alpha if alpha is None else alpha, 0.0, 1.0)),
            home_away=home_away or HomeAwayAdjustment(),
        )
