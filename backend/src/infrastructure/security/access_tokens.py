"""
Short-lived JWT access tokens (HS256).
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from jose import jwt, JWTError

from src.utils.time_utils import get_current_time


logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


@dataclass(frozen=True)
class AccessTokenClaims:
    user_id: int
    email: str


class AccessTokenService:
    """Signs and verifies access tokens carrying ``sub`` (user id) and ``email``."""

    def __init__(self, secret: str, ttl: timedelta = timedelta(minutes=15)):
        self.secret = secret
        self.ttl = ttl

    def sign(self, user_id: int, email: str) -> str:
        now = get_current_time()
        payload = {
            "sub": str(user_id),
            "email": email,
            "iat": int(now.timestamp()),
            "exp": int((now + self.ttl).timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> Optional[AccessTokenClaims]:
        """Return the claims of a valid token, or None when invalid or expired."""
        try:
            payload = jwt.decode(token, self.secret, algorithms=[ALGORITHM])
            return AccessTokenClaims(user_id=int(payload["sub"]), email=payload.get("email", ""))
        except (JWTError, KeyError, ValueError) as e:
            logger.debug(f"Rejected access token: {e}")
            return None
