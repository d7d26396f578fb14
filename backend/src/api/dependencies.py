"""
API Dependencies Module

Provides dependency injection for FastAPI routes.
The container is built once per app from explicit Settings and stored on
``app.state``; the factory functions below hand its parts to the routes.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from src.api.errors import ApiError
from src.core.config import Settings
from src.domain.entities.entities import User
from src.domain.services.session_service import SessionService
from src.domain.services.verification_service import VerificationService
from src.infrastructure.database.database_service import DatabaseService
from src.infrastructure.repositories.match_repository import SqlTeamRepository, SqlMatchRepository
from src.infrastructure.repositories.session_repository import (
    SqlRefreshSessionRepository,
    SqlEmailVerificationRepository,
)
from src.infrastructure.repositories.user_repository import SqlUserRepository
from src.infrastructure.security.access_tokens import AccessTokenService
from src.infrastructure.security.passwords import PasswordHasher


logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class Container:
    """Everything the routes need, wired from one Settings object."""
    settings: Settings
    db_service: DatabaseService
    team_repository: SqlTeamRepository
    match_repository: SqlMatchRepository
    user_repository: SqlUserRepository
    session_service: SessionService
    verification_service: VerificationService
    access_tokens: AccessTokenService
    password_hasher: PasswordHasher

    @classmethod
    def build(cls, settings: Settings) -> "Container":
        db_service = DatabaseService(settings.database_url)
        return cls(
            settings=settings,
            db_service=db_service,
            team_repository=SqlTeamRepository(db_service),
            match_repository=SqlMatchRepository(db_service),
            user_repository=SqlUserRepository(db_service),
            session_service=SessionService(
                SqlRefreshSessionRepository(db_service),
                ttl=timedelta(days=settings.refresh_token_ttl_days),
            ),
            verification_service=VerificationService(
                SqlEmailVerificationRepository(db_service),
                ttl=timedelta(hours=settings.email_verification_ttl_hours),
            ),
            access_tokens=AccessTokenService(
                settings.jwt_access_secret,
                ttl=timedelta(minutes=settings.access_token_ttl_minutes),
            ),
            password_hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
        )


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_settings(container: Container = Depends(get_container)) -> Settings:
    return container.settings


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    container: Container = Depends(get_container),
) -> User:
    """Resolve the user of a valid Bearer access token, or fail with 401."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise ApiError(401, "unauthorized", "Missing access token")

    claims = container.access_tokens.verify(credentials.credentials)
    if claims is None:
        raise ApiError(401, "unauthorized", "Invalid or expired access token")

    user = container.user_repository.get_user_by_id(claims.user_id)
    if user is None:
        raise ApiError(401, "unauthorized", "User not found")
    return user
