# messenger/repositories/user_repository.py

from sqlalchemy import select
from sqlalchemy.orm import Session

from messenger.core.base_repository import BaseRepository
from messenger.infrastructure.database.models.user_model import UserModel


class UserRepository(BaseRepository[UserModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def get_by_email(self, email: str) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.email == email, UserModel.deleted_at.is_(None))
        return self._session.execute(stmt).scalar_one_or_none()

    def get_by_id(self, user_id: int) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.id == user_id, UserModel.deleted_at.is_(None))
        return self._session.execute(stmt).scalar_one_or_none()

    def list_by_ids(self, user_ids: list[int]) -> list[UserModel]:
        if not user_ids:
            return []
        stmt = (
            select(UserModel)
            .where(UserModel.id.in_(user_ids), UserModel.deleted_at.is_(None))
            .order_by(UserModel.id.asc())
        )
        return list(self._session.execute(stmt).scalars().all())

    def list_active(self, limit: int = 50, offset: int = 0) -> list[UserModel]:
        stmt = (
            select(UserModel)
            .where(UserModel.deleted_at.is_(None))
            .order_by(UserModel.name.asc(), UserModel.id.asc())
            .limit(limit)
            .offset(offset)
        )
        return list(self._session.execute(stmt).scalars().all())

    def list_active_excluding(self, user_ids: list[int]) -> list[UserModel]:
        stmt = select(UserModel).where(UserModel.deleted_at.is_(None))
        if user_ids:
            stmt = stmt.where(UserModel.id.not_in(user_ids))
        stmt = stmt.order_by(UserModel.name.asc(), UserModel.id.asc())
        return list(self._session.execute(stmt).scalars().all())
