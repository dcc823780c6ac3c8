# messenger/repositories/thread_repository.py
from sqlalchemy import distinct, func, or_, select, update
from sqlalchemy.orm import Session

from messenger.core.base_repository import BaseRepository
from messenger.core.clock import utcnow
from messenger.infrastructure.database.models.participant_model import ParticipantModel
from messenger.infrastructure.database.models.thread_model import ThreadModel


class ThreadRepository(BaseRepository[ThreadModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def _live(self):
        return select(ThreadModel).where(ThreadModel.deleted_at.is_(None))

    def _for_user_stmt(self, user_id: int):
        return (
            self._live()
            .join(ParticipantModel, ParticipantModel.thread_id == ThreadModel.id)
            .where(
                ParticipantModel.user_id == user_id,
                ParticipantModel.deleted_at.is_(None),
            )
        )

    def _page(self, stmt, limit: int, offset: int) -> list[ThreadModel]:
        stmt = stmt.order_by(ThreadModel.updated_at.desc(), ThreadModel.id.desc()).limit(limit).offset(offset)
        return list(self._session.execute(stmt).scalars().all())

    def get_by_id(self, thread_id: int) -> ThreadModel | None:
        stmt = self._live().where(ThreadModel.id == thread_id)
        return self._session.execute(stmt).scalar_one_or_none()

    def list_all_latest(self, limit: int = 50, offset: int = 0) -> list[ThreadModel]:
        return self._page(self._live(), limit, offset)

    def list_for_user(self, user_id: int, limit: int = 50, offset: int = 0) -> list[ThreadModel]:
        return self._page(self._for_user_stmt(user_id), limit, offset)

    def list_for_user_with_new_messages(self, user_id: int, limit: int = 50, offset: int = 0) -> list[ThreadModel]:
        stmt = self._for_user_stmt(user_id).where(
            or_(
                ParticipantModel.last_read.is_(None),
                ThreadModel.updated_at > ParticipantModel.last_read,
            )
        )
        return self._page(stmt, limit, offset)

    def list_starred_for_user(self, user_id: int, limit: int = 50, offset: int = 0) -> list[ThreadModel]:
        stmt = self._for_user_stmt(user_id).where(ParticipantModel.starred.is_(True))
        return self._page(stmt, limit, offset)

    def list_between(self, user_ids: list[int], limit: int = 50, offset: int = 0) -> list[ThreadModel]:
        ids = sorted({int(x) for x in user_ids})
        if not ids:
            return []

        # threads cujos participantes ativos incluem todos os usuários informados
        matching = (
            select(ParticipantModel.thread_id)
            .where(
                ParticipantModel.user_id.in_(ids),
                ParticipantModel.deleted_at.is_(None),
            )
            .group_by(ParticipantModel.thread_id)
            .having(func.count(distinct(ParticipantModel.user_id)) == len(ids))
        )
        stmt = self._live().where(ThreadModel.id.in_(matching))
        return self._page(stmt, limit, offset)

    def list_by_subject(self, subject: str, limit: int = 50, offset: int = 0) -> list[ThreadModel]:
        pattern = f"%{subject.strip().lower()}%"
        stmt = self._live().where(func.lower(ThreadModel.subject).like(pattern))
        return self._page(stmt, limit, offset)

    def touch(self, thread_id: int) -> None:
        stmt = (
            update(ThreadModel)
            .where(ThreadModel.id == thread_id, ThreadModel.deleted_at.is_(None))
            .values(updated_at=utcnow())
        )
        self._session.execute(stmt)
