"""
E-mail Verification Domain Service

One-time verification tokens. Like refresh tokens, only their SHA-256 hash
is stored.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from src.domain.repositories.repositories import EmailVerificationRepository
from src.domain.services.session_service import generate_token, hash_token
from src.utils.time_utils import get_utc_now


logger = logging.getLogger(__name__)

DEFAULT_VERIFICATION_TTL = timedelta(hours=24)


class VerificationService:
    """Issues and consumes e-mail verification tokens."""

    def __init__(
        self,
        repository: EmailVerificationRepository,
        ttl: timedelta = DEFAULT_VERIFICATION_TTL,
        clock: Callable[[], datetime] = get_utc_now,
    ):
        self.repository = repository
        self.ttl = ttl
        self.clock = clock

    def issue(self, user_id: int) -> str:
        raw_token = generate_token()
        self.repository.add(user_id, hash_token(raw_token), self.clock() + self.ttl)
        return raw_token

    def consume(self, raw_token: str) -> Optional[int]:
        """Use a token once. Returns its user id, or None if unknown, used or expired."""
        user_id = self.repository.consume(hash_token(raw_token), self.clock())
        if user_id is None:
            logger.warning("Rejected e-mail verification token")
        return user_id
