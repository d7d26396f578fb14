"""
Auth Use Cases Module

Registration, login, refresh-token rotation, logout and e-mail verification.
The raw refresh token never appears in a DTO: use cases hand it back next to
the response so the API layer can place it in the cookie.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from src.domain.entities.entities import User
from src.domain.exceptions import RefreshInvalidError
from src.domain.repositories.repositories import UserRepository
from src.domain.result import Ok, Err, ErrorKind, Result
from src.domain.services.session_service import SessionService
from src.domain.services.verification_service import VerificationService
from src.infrastructure.security.access_tokens import AccessTokenService
from src.infrastructure.security.passwords import PasswordHasher
from src.application.dtos.dtos import (
    UserDTO,
    AuthResponseDTO,
    AccessTokenResponseDTO,
    MessageResponseDTO,
)


logger = logging.getLogger(__name__)

VERIFY_EMAIL_PATH = "/api/auth/verify-email"


@dataclass
class IssuedSession:
    """Response body plus the refresh token destined for the cookie."""
    response: AuthResponseDTO
    refresh_token: str


@dataclass
class RefreshedSession:
    response: AccessTokenResponseDTO
    refresh_token: str


def map_user_to_dto(user: User) -> UserDTO:
    return UserDTO(id=user.id, email=user.email, email_verified=user.email_verified)


def send_verification_link(public_base_url: str, email: str, raw_token: str) -> str:
    """Build the verification link. Delivery is not wired up, so the link is logged."""
    link = f"{public_base_url.rstrip('/')}{VERIFY_EMAIL_PATH}?token={raw_token}"
    logger.info(f"Verification link for {email}: {link}")
    return link


class RegisterUseCase:
    """Create an account, start its session and send the verification link."""

    def __init__(
        self,
        user_repository: UserRepository,
        password_hasher: PasswordHasher,
        session_service: SessionService,
        verification_service: VerificationService,
        access_tokens: AccessTokenService,
        public_base_url: str,
    ):
        self.user_repository = user_repository
        self.password_hasher = password_hasher
        self.session_service = session_service
        self.verification_service = verification_service
        self.access_tokens = access_tokens
        self.public_base_url = public_base_url

    def execute(self, email: str, password: str) -> Result[IssuedSession]:
        email = email.strip().lower()
        if self.user_repository.get_user_by_email(email) is not None:
            return Err(ErrorKind.CONFLICT, "Email already in use")

        user = self.user_repository.create_user(email, self.password_hasher.hash(password))
        logger.info(f"Registered user {user.id}")

        token = self.verification_service.issue(user.id)
        send_verification_link(self.public_base_url, user.email, token)

        return Ok(IssuedSession(
            response=AuthResponseDTO(
                user=map_user_to_dto(user),
                access_token=self.access_tokens.sign(user.id, user.email),
            ),
            refresh_token=self.session_service.issue(user.id),
        ))


class LoginUseCase:
    """Check credentials and start a new session."""

    def __init__(
        self,
        user_repository: UserRepository,
        password_hasher: PasswordHasher,
        session_service: SessionService,
        access_tokens: AccessTokenService,
    ):
        self.user_repository = user_repository
        self.password_hasher = password_hasher
        self.session_service = session_service
        self.access_tokens = access_tokens

    def execute(self, email: str, password: str) -> Result[IssuedSession]:
        user = self.user_repository.get_user_by_email(email.strip())
        if user is None or not self.password_hasher.verify(password, user.password_hash):
            return Err(ErrorKind.UNAUTHORIZED, "Invalid credentials")

        return Ok(IssuedSession(
            response=AuthResponseDTO(
                user=map_user_to_dto(user),
                access_token=self.access_tokens.sign(user.id, user.email),
            ),
            refresh_token=self.session_service.issue(user.id),
        ))


class RefreshUseCase:
    """
    Rotate the refresh token and mint a new access token.

    Any failure is REFRESH_INVALID: the caller must drop the cookie and
    send the user back to login.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        session_service: SessionService,
        access_tokens: AccessTokenService,
    ):
        self.user_repository = user_repository
        self.session_service = session_service
        self.access_tokens = access_tokens

    def execute(self, raw_token: Optional[str]) -> Result[RefreshedSession]:
        if not raw_token:
            return Err(ErrorKind.REFRESH_INVALID, "Missing refresh token")

        try:
            rotated = self.session_service.rotate(raw_token)
        except RefreshInvalidError as e:
            return Err(ErrorKind.REFRESH_INVALID, str(e))

        user = self.user_repository.get_user_by_id(rotated.user_id)
        if user is None:
            self.session_service.revoke(rotated.raw_token)
            return Err(ErrorKind.REFRESH_INVALID, "User not found")

        return Ok(RefreshedSession(
            response=AccessTokenResponseDTO(access_token=self.access_tokens.sign(user.id, user.email)),
            refresh_token=rotated.raw_token,
        ))


class LogoutUseCase:
    """Revoke the presented refresh token, if any."""

    def __init__(self, session_service: SessionService):
        self.session_service = session_service

    def execute(self, raw_token: Optional[str]) -> Result[MessageResponseDTO]:
        if raw_token:
            self.session_service.revoke(raw_token)
        return Ok(MessageResponseDTO(ok=True))


class VerifyEmailUseCase:
    def __init__(self, user_repository: UserRepository, verification_service: VerificationService):
        self.user_repository = user_repository
        self.verification_service = verification_service

    def execute(self, raw_token: Optional[str]) -> Result[MessageResponseDTO]:
        if not raw_token:
            return Err(ErrorKind.INVALID_INPUT, "Missing token")

        user_id = self.verification_service.consume(raw_token)
        if user_id is None:
            return Err(ErrorKind.INVALID_INPUT, "Invalid or expired token")

        self.user_repository.mark_email_verified(user_id)
        logger.info(f"Verified e-mail of user {user_id}")
        return Ok(MessageResponseDTO(ok=True, message="Email verified"))


class RequestVerificationUseCase:
    """Send a fresh verification link to the signed-in user."""

    def __init__(self, verification_service: VerificationService, public_base_url: str):
        self.verification_service = verification_service
        self.public_base_url = public_base_url

    def execute(self, user: User) -> Result[MessageResponseDTO]:
        if user.email_verified:
            return Ok(MessageResponseDTO(ok=True, message="Email already verified"))

        token = self.verification_service.issue(user.id)
        send_verification_link(self.public_base_url, user.email, token)
        return Ok(MessageResponseDTO(ok=True, message="Verification email sent"))
