"""
Session Domain Service

Issues, rotates and revokes opaque refresh tokens. Only a SHA-256 hash of
each token is stored, so a leaked table does not expose usable tokens.
"""

import hashlib
import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional

from src.domain.entities.entities import RotatedSession
from src.domain.exceptions import RefreshInvalidError
from src.domain.repositories.repositories import RefreshSessionRepository
from src.utils.time_utils import get_utc_now


logger = logging.getLogger(__name__)

DEFAULT_REFRESH_TTL = timedelta(days=7)
TOKEN_BYTES = 32


def hash_token(raw_token: str) -> str:
    """SHA-256 hex digest of a raw token."""
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def generate_token() -> str:
    """Random url-safe token (32 bytes of entropy)."""
    return secrets.token_urlsafe(TOKEN_BYTES)


class SessionService:
    """
    Refresh-token protocol.

    A session is Active (not revoked, not expired), Revoked, or Expired.
    Rotation is one-time use: the presented token is revoked and replaced in
    the same transaction, so a replayed token always fails.
    """

    def __init__(
        self,
        repository: RefreshSessionRepository,
        ttl: timedelta = DEFAULT_REFRESH_TTL,
        clock: Callable[[], datetime] = get_utc_now,
    ):
        self.repository = repository
        self.ttl = ttl
        self.clock = clock

    def issue(self, user_id: int) -> str:
        """Create a new active session and return its raw token."""
        raw_token = generate_token()
        self.repository.add(user_id, hash_token(raw_token), self.clock() + self.ttl)
        logger.info(f"Issued refresh session for user {user_id}")
        return raw_token

    def rotate(self, raw_token: str) -> RotatedSession:
        """
        Exchange an active token for a new one.

        Raises:
            RefreshInvalidError: the token has no active session. Callers must
                treat this as a forced logout and never retry.
        """
        now = self.clock()
        new_token = generate_token()
        user_id = self.repository.rotate(
            old_hash=hash_token(raw_token),
            new_hash=hash_token(new_token),
            new_expires_at=now + self.ttl,
            now=now,
        )
        if user_id is None:
            logger.warning("Rejected refresh token rotation: no active session")
            raise RefreshInvalidError("Refresh token revoked/expired")

        logger.info(f"Rotated refresh session for user {user_id}")
        return RotatedSession(user_id=user_id, raw_token=new_token)

    def revoke(self, raw_token: str) -> None:
        """Revoke a token. Unknown or already revoked tokens are ignored."""
        if self.repository.revoke(hash_token(raw_token), self.clock()):
            logger.info("Revoked refresh session")

    def validate(self, raw_token: str) -> Optional[int]:
        """Return the owner of an active token without rotating it."""
        return self.repository.find_active_user_id(hash_token(raw_token), self.clock())
