"""
Auth API Routes

The access token is returned in the body; the refresh token lives in an
httpOnly cookie scoped to /api/auth.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Query, Response

from src.api.dependencies import Container, get_container, get_current_user
from src.api.errors import err_response, unwrap
from src.application.dtos.dtos import (
    CredentialsRequestDTO,
    AuthResponseDTO,
    AccessTokenResponseDTO,
    MessageResponseDTO,
    UserDTO,
    ErrorResponseDTO,
)
from src.application.use_cases.auth_use_cases import (
    RegisterUseCase,
    LoginUseCase,
    RefreshUseCase,
    LogoutUseCase,
    VerifyEmailUseCase,
    RequestVerificationUseCase,
    map_user_to_dto,
)
from src.core.config import Settings
from src.domain.entities.entities import User
from src.domain.result import Err


router = APIRouter()
logger = logging.getLogger(__name__)

REFRESH_COOKIE_NAME = "refresh_token"
REFRESH_COOKIE_PATH = "/api/auth"


def set_refresh_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        REFRESH_COOKIE_NAME,
        token,
        max_age=settings.refresh_token_ttl_days * 24 * 60 * 60,
        path=REFRESH_COOKIE_PATH,
        secure=settings.is_production,
        httponly=True,
        samesite="lax",
    )


def clear_refresh_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        REFRESH_COOKIE_NAME,
        path=REFRESH_COOKIE_PATH,
        secure=settings.is_production,
        httponly=True,
        samesite="lax",
    )


@router.post(
    "/register",
    response_model=AuthResponseDTO,
    status_code=201,
    responses={409: {"model": ErrorResponseDTO, "description": "Email already in use"}},
    summary="Create an account",
)
def register(
    body: CredentialsRequestDTO,
    response: Response,
    container: Container = Depends(get_container),
) -> AuthResponseDTO:
    use_case = RegisterUseCase(
        container.user_repository,
        container.password_hasher,
        container.session_service,
        container.verification_service,
        container.access_tokens,
        container.settings.public_base_url,
    )
    issued = unwrap(use_case.execute(body.email, body.password))
    set_refresh_cookie(response, issued.refresh_token, container.settings)
    return issued.response


@router.post(
    "/login",
    response_model=AuthResponseDTO,
    responses={401: {"model": ErrorResponseDTO, "description": "Invalid credentials"}},
    summary="Sign in",
)
def login(
    body: CredentialsRequestDTO,
    response: Response,
    container: Container = Depends(get_container),
) -> AuthResponseDTO:
    use_case = LoginUseCase(
        container.user_repository,
        container.password_hasher,
        container.session_service,
        container.access_tokens,
    )
    issued = unwrap(use_case.execute(body.email, body.password))
    set_refresh_cookie(response, issued.refresh_token, container.settings)
    return issued.response


@router.post(
    "/refresh",
    response_model=AccessTokenResponseDTO,
    responses={401: {"model": ErrorResponseDTO, "description": "Refresh token revoked/expired"}},
    summary="Rotate the refresh token",
    description="One-time use: the presented token is revoked and a new one is set in the cookie.",
)
def refresh(
    response: Response,
    refresh_token: Optional[str] = Cookie(None),
    container: Container = Depends(get_container),
) -> AccessTokenResponseDTO:
    use_case = RefreshUseCase(container.user_repository, container.session_service, container.access_tokens)
    result = use_case.execute(refresh_token)
    if isinstance(result, Err):
        # Force re-login on the client
        failure = err_response(result)
        clear_refresh_cookie(failure, container.settings)
        return failure

    set_refresh_cookie(response, result.value.refresh_token, container.settings)
    return result.value.response


@router.post("/logout", response_model=MessageResponseDTO, summary="Sign out")
def logout(
    response: Response,
    refresh_token: Optional[str] = Cookie(None),
    container: Container = Depends(get_container),
) -> MessageResponseDTO:
    result = unwrap(LogoutUseCase(container.session_service).execute(refresh_token))
    clear_refresh_cookie(response, container.settings)
    return result


@router.get(
    "/verify-email",
    response_model=MessageResponseDTO,
    responses={400: {"model": ErrorResponseDTO, "description": "Invalid or expired token"}},
    summary="Verify an e-mail address",
)
def verify_email(
    token: Optional[str] = Query(None),
    container: Container = Depends(get_container),
) -> MessageResponseDTO:
    use_case = VerifyEmailUseCase(container.user_repository, container.verification_service)
    return unwrap(use_case.execute(token))


@router.post("/request-verify", response_model=MessageResponseDTO, summary="Resend the verification link")
def request_verify(
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
) -> MessageResponseDTO:
    use_case = RequestVerificationUseCase(container.verification_service, container.settings.public_base_url)
    return unwrap(use_case.execute(user))


@router.get("/me", response_model=UserDTO, summary="Current user")
def me(user: User = Depends(get_current_user)) -> UserDTO:
    return map_user_to_dto(user)
