"""
Domain Repository Interfaces Module

These are abstract interfaces that define how the domain layer accesses data.
Concrete implementations are provided in the infrastructure layer.
This follows the Dependency Inversion Principle (DIP).
"""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import datetime

from src.domain.entities.entities import (
    Team,
    Match,
    User,
    UserSettings,
    FavoriteTeam,
)


class TeamRepository(ABC):
    """Abstract repository for team operations."""

    @abstractmethod
    def list_teams(self) -> list[Team]:
        """Get all teams, most popular first."""
        pass

    @abstractmethod
    def get_team_by_id(self, team_id: int) -> Optional[Team]:
        """Get a specific team by internal ID."""
        pass


class MatchRepository(ABC):
    """Abstract repository for match operations. Team ids are external ids."""

    @abstractmethod
    def recent_finished_matches(self, team_id: int, limit: int) -> list[Match]:
        """Get the latest finished matches of a team, newest first."""
        pass

    @abstractmethod
    def upcoming_fixtures(self, team_id: int, limit: int) -> list[Match]:
        """Get not finished, not cancelled matches of a team, soonest first."""
        pass

    @abstractmethod
    def team_matches(self, team_id: int, limit: int) -> list[Match]:
        """Get all matches of a team, newest first."""
        pass


class RefreshSessionRepository(ABC):
    """Abstract store of hashed refresh sessions."""

    @abstractmethod
    def add(self, user_id: int, token_hash: str, expires_at: datetime) -> None:
        """Persist a new active session."""
        pass

    @abstractmethod
    def find_active_user_id(self, token_hash: str, now: datetime) -> Optional[int]:
        """Return the owner of an active session, or None."""
        pass

    @abstractmethod
    def revoke(self, token_hash: str, now: datetime) -> bool:
        """Revoke an active session. Returns False when nothing was revoked."""
        pass

    @abstractmethod
    def rotate(
        self,
        old_hash: str,
        new_hash: str,
        new_expires_at: datetime,
        now: datetime,
    ) -> Optional[int]:
        """
        Atomically revoke the active session ``old_hash`` and insert ``new_hash``
        for the same user. Returns the user id, or None when ``old_hash`` has no
        active session (nothing is written in that case).
        """
        pass


class EmailVerificationRepository(ABC):
    """Abstract store of one-time e-mail verification tokens."""

    @abstractmethod
    def add(self, user_id: int, token_hash: str, expires_at: datetime) -> None:
        pass

    @abstractmethod
    def consume(self, token_hash: str, now: datetime) -> Optional[int]:
        """Atomically mark an unused, unexpired token as used and return its user id."""
        pass


class UserRepository(ABC):
    """Abstract repository for users, their settings and favorite teams."""

    @abstractmethod
    def create_user(self, email: str, password_hash: str) -> User:
        pass

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    def get_user_by_id(self, user_id: int) -> Optional[User]:
        pass

    @abstractmethod
    def mark_email_verified(self, user_id: int) -> None:
        pass

    @abstractmethod
    def update_email_opt_in(self, user_id: int, email_opt_in: bool) -> Optional[UserSettings]:
        pass

    @abstractmethod
    def list_favorites(self, user_id: int) -> list[FavoriteTeam]:
        pass

    @abstractmethod
    def add_favorite(self, user_id: int, team_id: int) -> None:
        """Add a favorite team; adding an existing favorite is a no-op."""
        pass

    @abstractmethod
    def remove_favorite(self, user_id: int, team_id: int) -> None:
        """Remove a favorite team; removing a missing favorite is a no-op."""
        pass
