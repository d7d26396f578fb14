"""
Account API Routes

Settings and favorite teams of the signed-in user.
"""

import logging

from fastapi import APIRouter, Depends, Path

from src.api.dependencies import Container, get_container, get_current_user
from src.api.errors import unwrap
from src.application.dtos.dtos import (
    UserSettingsDTO,
    UpdateSettingsRequestDTO,
    FavoritesResponseDTO,
    AddFavoriteRequestDTO,
    MessageResponseDTO,
    ErrorResponseDTO,
)
from src.application.use_cases.me_use_cases import (
    GetSettingsUseCase,
    UpdateSettingsUseCase,
    ListFavoritesUseCase,
    AddFavoriteUseCase,
    RemoveFavoriteUseCase,
)
from src.domain.entities.entities import User


router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/settings", response_model=UserSettingsDTO, summary="Get account settings")
def get_settings(
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
) -> UserSettingsDTO:
    return unwrap(GetSettingsUseCase(container.user_repository).execute(user.id))


@router.patch(
    "/settings",
    response_model=UserSettingsDTO,
    responses={403: {"model": ErrorResponseDTO, "description": "Email must be verified to enable reminders"}},
    summary="Update account settings",
)
def update_settings(
    body: UpdateSettingsRequestDTO,
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
) -> UserSettingsDTO:
    return unwrap(UpdateSettingsUseCase(container.user_repository).execute(user.id, body.email_opt_in))


@router.get("/favorites", response_model=FavoritesResponseDTO, summary="List favorite teams")
def list_favorites(
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
) -> FavoritesResponseDTO:
    return unwrap(ListFavoritesUseCase(container.user_repository).execute(user))


@router.post(
    "/favorites",
    response_model=MessageResponseDTO,
    responses={404: {"model": ErrorResponseDTO, "description": "Team not found"}},
    summary="Add a favorite team",
)
def add_favorite(
    body: AddFavoriteRequestDTO,
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
) -> MessageResponseDTO:
    use_case = AddFavoriteUseCase(container.user_repository, container.team_repository)
    return unwrap(use_case.execute(user, body.team_id))


@router.delete("/favorites/{team_id}", response_model=MessageResponseDTO, summary="Remove a favorite team")
def remove_favorite(
    team_id: int = Path(..., description="Internal team id"),
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
) -> MessageResponseDTO:
    return unwrap(RemoveFavoriteUseCase(container.user_repository).execute(user, team_id))
