# messenger/repositories/participant_repository.py

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from messenger.core.base_repository import BaseRepository
from messenger.core.clock import utcnow
from messenger.infrastructure.database.models.participant_model import ParticipantModel
from messenger.infrastructure.database.models.user_model import UserModel


class ParticipantRepository(BaseRepository[ParticipantModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def get(self, *, thread_id: int, user_id: int) -> ParticipantModel | None:
        stmt = (
            select(ParticipantModel)
            .where(
                ParticipantModel.thread_id == thread_id,
                ParticipantModel.user_id == user_id,
                ParticipantModel.deleted_at.is_(None),
            )
        )
        return self._session.execute(stmt).scalars().first()

    # inclui arquivados
    def get_any(self, *, thread_id: int, user_id: int) -> ParticipantModel | None:
        stmt = select(ParticipantModel).where(
            ParticipantModel.thread_id == thread_id,
            ParticipantModel.user_id == user_id,
        )
        return self._session.execute(stmt).scalars().first()

    def ensure(self, *, thread_id: int, user_id: int, company_id: int | None = None) -> ParticipantModel:
        """Participação ativa do usuário; restaura a arquivada em vez de duplicar."""
        existing = self.get_any(thread_id=thread_id, user_id=user_id)
        if existing is not None:
            if existing.deleted_at is not None:
                existing.deleted_at = None
                existing.updated_at = utcnow()
            if company_id is not None and existing.company_id is None:
                existing.company_id = company_id
            self._session.flush()
            return existing

        return self.add(
            ParticipantModel(thread_id=thread_id, user_id=user_id, company_id=company_id, starred=False)
        )

    def list_user_ids(self, *, thread_id: int, include_deleted: bool = True) -> list[int]:
        stmt = select(ParticipantModel.user_id).where(ParticipantModel.thread_id == thread_id)
        if not include_deleted:
            stmt = stmt.where(ParticipantModel.deleted_at.is_(None))
        stmt = stmt.order_by(ParticipantModel.id.asc())
        return [int(x) for x in self._session.execute(stmt).scalars().all()]

    def list_rows(self, *, thread_id: int):
        stmt = (
            select(ParticipantModel, UserModel)
            .join(UserModel, UserModel.id == ParticipantModel.user_id)
            .where(
                ParticipantModel.thread_id == thread_id,
                ParticipantModel.deleted_at.is_(None),
            )
            .order_by(ParticipantModel.id.asc())
        )
        return list(self._session.execute(stmt).all())  # [(participant, user)]

    def count_active(self, *, thread_id: int) -> int:
        stmt = select(func.count(ParticipantModel.id)).where(
            ParticipantModel.thread_id == thread_id,
            ParticipantModel.deleted_at.is_(None),
        )
        return int(self._session.execute(stmt).scalar_one())

    def map_for_user(self, *, user_id: int, thread_ids: list[int]) -> dict[int, ParticipantModel]:
        if not thread_ids:
            return {}
        stmt = select(ParticipantModel).where(
            ParticipantModel.user_id == user_id,
            ParticipantModel.thread_id.in_(thread_ids),
            ParticipantModel.deleted_at.is_(None),
        )
        return {p.thread_id: p for p in self._session.execute(stmt).scalars().all()}

    def set_last_read(self, *, thread_id: int, user_id: int) -> bool:
        now = utcnow()
        stmt = (
            update(ParticipantModel)
            .where(
                ParticipantModel.thread_id == thread_id,
                ParticipantModel.user_id == user_id,
                ParticipantModel.deleted_at.is_(None),
            )
            .values(last_read=now, updated_at=now)
        )
        res = self._session.execute(stmt)
        return (res.rowcount or 0) > 0

    def set_starred(self, *, thread_id: int, user_id: int, starred: bool) -> bool:
        stmt = (
            update(ParticipantModel)
            .where(
                ParticipantModel.thread_id == thread_id,
                ParticipantModel.user_id == user_id,
                ParticipantModel.deleted_at.is_(None),
            )
            .values(starred=starred, updated_at=utcnow())
        )
        res = self._session.execute(stmt)
        return (res.rowcount or 0) > 0

    def soft_delete_users(self, *, thread_id: int, user_ids: list[int]) -> int:
        if not user_ids:
            return 0
        now = utcnow()
        stmt = (
            update(ParticipantModel)
            .where(
                ParticipantModel.thread_id == thread_id,
                ParticipantModel.user_id.in_(user_ids),
                ParticipantModel.deleted_at.is_(None),
            )
            .values(deleted_at=now, updated_at=now)
        )
        res = self._session.execute(stmt)
        return int(res.rowcount or 0)

    def restore_all(self, *, thread_id: int) -> int:
        stmt = (
            update(ParticipantModel)
            .where(
                ParticipantModel.thread_id == thread_id,
                ParticipantModel.deleted_at.is_not(None),
            )
            .values(deleted_at=None, updated_at=utcnow())
        )
        res = self._session.execute(stmt)
        return int(res.rowcount or 0)
