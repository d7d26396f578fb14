import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

from src.domain.entities.entities import User, UserSettings, FavoriteTeam
from src.domain.repositories.repositories import UserRepository
from src.infrastructure.database.database_service import DatabaseService
from src.infrastructure.database.models import UserModel, TeamModel, FavoriteTeamModel
from src.infrastructure.repositories.match_repository import to_team_entity
from src.utils.time_utils import get_utc_now


logger = logging.getLogger(__name__)


def _to_user(row: Optional[UserModel]) -> Optional[User]:
    if row is None:
        return None
    return User(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        email_verified=row.email_verified,
        email_opt_in=row.email_opt_in,
        time_zone=row.time_zone,
        created_at=row.created_at,
    )


class SqlUserRepository(UserRepository):
    """Users, their settings and favorite teams."""

    def __init__(self, db_service: DatabaseService):
        self.db_service = db_service

    def create_user(self, email: str, password_hash: str) -> User:
        session = self.db_service.get_session()
        try:
            record = UserModel(email=email.lower(), password_hash=password_hash)
            session.add(record)
            session.commit()
            session.refresh(record)
            return _to_user(record)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_user_by_email(self, email: str) -> Optional[User]:
        session = self.db_service.get_session()
        try:
            record = session.query(UserModel).filter(UserModel.email == email.lower()).first()
            return _to_user(record)
        finally:
            session.close()

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        session = self.db_service.get_session()
        try:
            return _to_user(session.get(UserModel, user_id))
        finally:
            session.close()

    def mark_email_verified(self, user_id: int) -> None:
        session = self.db_service.get_session()
        try:
            session.query(UserModel).filter(UserModel.id == user_id).update(
                {UserModel.email_verified: True, UserModel.updated_at: get_utc_now()},
                synchronize_session=False,
            )
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def update_email_opt_in(self, user_id: int, email_opt_in: bool) -> Optional[UserSettings]:
        session = self.db_service.get_session()
        try:
            record = session.get(UserModel, user_id)
            if record is None:
                return None
            record.email_opt_in = email_opt_in
            record.updated_at = get_utc_now()
            session.commit()
            return UserSettings(
                email_verified=record.email_verified,
                email_opt_in=record.email_opt_in,
                time_zone=record.time_zone,
            )
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def list_favorites(self, user_id: int) -> list[FavoriteTeam]:
        session = self.db_service.get_session()
        try:
            rows = (
                session.query(TeamModel, FavoriteTeamModel.created_at)
                .join(FavoriteTeamModel, FavoriteTeamModel.team_id == TeamModel.id)
                .filter(FavoriteTeamModel.user_id == user_id)
                .order_by(FavoriteTeamModel.created_at.desc(), FavoriteTeamModel.id.desc())
                .all()
            )
            return [FavoriteTeam(team=to_team_entity(team), favorited_at=created_at) for team, created_at in rows]
        finally:
            session.close()

    def add_favorite(self, user_id: int, team_id: int) -> None:
        session = self.db_service.get_session()
        try:
            exists = session.query(FavoriteTeamModel).filter(
                FavoriteTeamModel.user_id == user_id,
                FavoriteTeamModel.team_id == team_id,
            ).first()
            if exists:
                return
            session.add(FavoriteTeamModel(user_id=user_id, team_id=team_id))
            session.commit()
        except IntegrityError:
            # Concurrent insert of the same favorite
            session.rollback()
            logger.info(f"Favorite team {team_id} already stored for user {user_id}")
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def remove_favorite(self, user_id: int, team_id: int) -> None:
        session = self.db_service.get_session()
        try:
            session.query(FavoriteTeamModel).filter(
                FavoriteTeamModel.user_id == user_id,
                FavoriteTeamModel.team_id == team_id,
            ).delete(synchronize_session=False)
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
