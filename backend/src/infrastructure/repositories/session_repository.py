"""
SQL stores for refresh sessions and e-mail verification tokens.

Database errors roll the transaction back and propagate to the caller.
"""

import logging
from datetime import datetime
from typing import Optional

from src.domain.repositories.repositories import (
    RefreshSessionRepository,
    EmailVerificationRepository,
)
from src.infrastructure.database.database_service import DatabaseService
from src.infrastructure.database.models import RefreshTokenModel, EmailVerificationTokenModel


logger = logging.getLogger(__name__)


class SqlRefreshSessionRepository(RefreshSessionRepository):
    """Refresh sessions in the ``refresh_tokens`` table."""

    def __init__(self, db_service: DatabaseService):
        self.db_service = db_service

    def _active(self, session, token_hash: str, now: datetime):
        return session.query(RefreshTokenModel).filter(
            RefreshTokenModel.token_hash == token_hash,
            RefreshTokenModel.revoked_at.is_(None),
            RefreshTokenModel.expires_at > now,
        )

    def add(self, user_id: int, token_hash: str, expires_at: datetime) -> None:
        session = self.db_service.get_session()
        try:
            session.add(RefreshTokenModel(user_id=user_id, token_hash=token_hash, expires_at=expires_at))
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def find_active_user_id(self, token_hash: str, now: datetime) -> Optional[int]:
        session = self.db_service.get_session()
        try:
            record = self._active(session, token_hash, now).first()
            return record.user_id if record else None
        finally:
            session.close()

    def revoke(self, token_hash: str, now: datetime) -> bool:
        session = self.db_service.get_session()
        try:
            updated = session.query(RefreshTokenModel).filter(
                RefreshTokenModel.token_hash == token_hash,
                RefreshTokenModel.revoked_at.is_(None),
            ).update({RefreshTokenModel.revoked_at: now}, synchronize_session=False)
            session.commit()
            return updated > 0
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def rotate(
        self,
        old_hash: str,
        new_hash: str,
        new_expires_at: datetime,
        now: datetime,
    ) -> Optional[int]:
        session = self.db_service.get_session()
        try:
            # Lock the session row so two refresh calls can't both succeed
            record = self._active(session, old_hash, now).with_for_update().first()
            if record is None:
                session.rollback()
                return None

            user_id = record.user_id
            record.revoked_at = now
            session.add(RefreshTokenModel(
                user_id=user_id,
                token_hash=new_hash,
                expires_at=new_expires_at,
                created_at=now,
            ))
            session.commit()
            return user_id
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


class SqlEmailVerificationRepository(EmailVerificationRepository):
    """One-time verification tokens in ``email_verification_tokens``."""

    def __init__(self, db_service: DatabaseService):
        self.db_service = db_service

    def add(self, user_id: int, token_hash: str, expires_at: datetime) -> None:
        session = self.db_service.get_session()
        try:
            session.add(EmailVerificationTokenModel(user_id=user_id, token_hash=token_hash, expires_at=expires_at))
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def consume(self, token_hash: str, now: datetime) -> Optional[int]:
        session = self.db_service.get_session()
        try:
            # Lock row so token can't be used twice concurrently
            record = session.query(EmailVerificationTokenModel).filter(
                EmailVerificationTokenModel.token_hash == token_hash,
                EmailVerificationTokenModel.used_at.is_(None),
                EmailVerificationTokenModel.expires_at > now,
            ).with_for_update().first()
            if record is None:
                session.rollback()
                return None

            user_id = record.user_id
            record.used_at = now
            session.commit()
            return user_id
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
