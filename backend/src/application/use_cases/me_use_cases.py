"""
Account Use Cases Module

Settings and favorite teams of the signed-in user.
"""

import logging

from src.domain.entities.entities import User
from src.domain.repositories.repositories import TeamRepository, UserRepository
from src.domain.result import Ok, Err, ErrorKind, Result
from src.application.dtos.dtos import (
    UserSettingsDTO,
    FavoriteTeamDTO,
    FavoritesResponseDTO,
    MessageResponseDTO,
)
from src.application.use_cases.team_use_cases import load_team


logger = logging.getLogger(__name__)


class GetSettingsUseCase:
    def __init__(self, user_repository: UserRepository):
        self.user_repository = user_repository

    def execute(self, user_id: int) -> Result[UserSettingsDTO]:
        user = self.user_repository.get_user_by_id(user_id)
        if user is None:
            return Err(ErrorKind.NOT_FOUND, "User not found")
        return Ok(UserSettingsDTO(
            email_verified=user.email_verified,
            email_opt_in=user.email_opt_in,
            time_zone=user.time_zone,
        ))


class UpdateSettingsUseCase:
    """Toggle e-mail reminders. Turning them on requires a verified e-mail."""

    def __init__(self, user_repository: UserRepository):
        self.user_repository = user_repository

    def execute(self, user_id: int, email_opt_in: bool) -> Result[UserSettingsDTO]:
        user = self.user_repository.get_user_by_id(user_id)
        if user is None:
            return Err(ErrorKind.NOT_FOUND, "User not found")
        if email_opt_in and not user.email_verified:
            return Err(ErrorKind.FORBIDDEN, "Email must be verified to enable reminders")

        settings = self.user_repository.update_email_opt_in(user_id, email_opt_in)
        if settings is None:
            return Err(ErrorKind.NOT_FOUND, "User not found")
        return Ok(UserSettingsDTO(
            email_verified=settings.email_verified,
            email_opt_in=settings.email_opt_in,
            time_zone=settings.time_zone,
        ))


class ListFavoritesUseCase:
    def __init__(self, user_repository: UserRepository):
        self.user_repository = user_repository

    def execute(self, user: User) -> Result[FavoritesResponseDTO]:
        favorites = self.user_repository.list_favorites(user.id)
        return Ok(FavoritesResponseDTO(favorites=[
            FavoriteTeamDTO(
                id=f.team.id,
                external_team_id=f.team.external_team_id,
                name=f.team.name,
                short_name=f.team.short_name,
                color=f.team.color,
                away_color=f.team.away_color,
                image_version=f.team.image_version,
                favorited_at=f.favorited_at,
            )
            for f in favorites
        ]))


class AddFavoriteUseCase:
    """Add a favorite team. Adding it twice is not an error."""

    def __init__(self, user_repository: UserRepository, team_repository: TeamRepository):
        self.user_repository = user_repository
        self.team_repository = team_repository

    def execute(self, user: User, team_id: int) -> Result[MessageResponseDTO]:
        team = load_team(self.team_repository, team_id)
        if isinstance(team, Err):
            return team

        self.user_repository.add_favorite(user.id, team.id)
        logger.info(f"User {user.id} favorited team {team.id}")
        return Ok(MessageResponseDTO(ok=True))


class RemoveFavoriteUseCase:
    """Remove a favorite team. Removing a missing favorite is not an error."""

    def __init__(self, user_repository: UserRepository):
        self.user_repository = user_repository

    def execute(self, user: User, team_id: int) -> Result[MessageResponseDTO]:
        if team_id <= 0:
            return Err(ErrorKind.INVALID_INPUT, "Invalid team id")
        self.user_repository.remove_favorite(user.id, team_id)
        return Ok(MessageResponseDTO(ok=True))
