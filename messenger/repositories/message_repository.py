# messenger/repositories/message_repository.py

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session, aliased

from messenger.core.base_repository import BaseRepository
from messenger.core.clock import utcnow
from messenger.infrastructure.database.models.company_model import CompanyModel
from messenger.infrastructure.database.models.message_model import MessageModel
from messenger.infrastructure.database.models.participant_model import ParticipantModel
from messenger.infrastructure.database.models.thread_model import ThreadModel
from messenger.infrastructure.database.models.user_model import UserModel


class MessageRepository(BaseRepository[MessageModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def _rows_stmt(self):
        sender = aliased(UserModel)
        company = aliased(CompanyModel)
        stmt = (
            select(MessageModel, sender, company)
            .outerjoin(sender, sender.id == MessageModel.user_id)
            .outerjoin(company, (company.id == MessageModel.company_id) & company.deleted_at.is_(None))
            .where(MessageModel.deleted_at.is_(None))
        )
        return stmt

    def _unread_stmt(self, user_id: int):
        # mensagens de outros usuários, em threads ativas, criadas depois do last_read
        return (
            select(MessageModel)
            .join(ThreadModel, ThreadModel.id == MessageModel.thread_id)
            .join(
                ParticipantModel,
                ParticipantModel.thread_id == MessageModel.thread_id,
            )
            .where(
                ThreadModel.deleted_at.is_(None),
                MessageModel.deleted_at.is_(None),
                MessageModel.user_id != user_id,
                ParticipantModel.user_id == user_id,
                ParticipantModel.deleted_at.is_(None),
                or_(
                    ParticipantModel.last_read.is_(None),
                    ParticipantModel.last_read < MessageModel.created_at,
                ),
            )
        )

    def get_row(self, *, message_id: int):
        stmt = self._rows_stmt().where(MessageModel.id == message_id)
        return self._session.execute(stmt).first()  # (msg, sender, company) | None

    def list_rows_by_thread(self, *, thread_id: int, limit: int | None = None, offset: int = 0):
        stmt = (
            self._rows_stmt()
            .where(MessageModel.thread_id == thread_id)
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
        )
        if limit is not None:
            stmt = stmt.limit(limit).offset(offset)
        return list(self._session.execute(stmt).all())

    def first_row_in_thread(self, *, thread_id: int):
        stmt = (
            self._rows_stmt()
            .where(MessageModel.thread_id == thread_id)
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
            .limit(1)
        )
        return self._session.execute(stmt).first()

    def latest_row_in_thread(self, *, thread_id: int):
        stmt = (
            self._rows_stmt()
            .where(MessageModel.thread_id == thread_id)
            .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
            .limit(1)
        )
        return self._session.execute(stmt).first()

    def list_unread_in_thread(self, *, thread_id: int, user_id: int) -> list[MessageModel]:
        stmt = (
            self._unread_stmt(user_id)
            .where(MessageModel.thread_id == thread_id)
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
        )
        return list(self._session.execute(stmt).scalars().all())

    def count_unread_for_user(self, *, user_id: int) -> int:
        stmt = select(func.count()).select_from(self._unread_stmt(user_id).subquery())
        return int(self._session.execute(stmt).scalar_one())

    def count_unread_by_thread(self, *, user_id: int, thread_ids: list[int]) -> dict[int, int]:
        if not thread_ids:
            return {}
        unread = self._unread_stmt(user_id).where(MessageModel.thread_id.in_(thread_ids)).subquery()
        stmt = select(unread.c.thread_id, func.count(unread.c.id).label("unread_count")).group_by(unread.c.thread_id)
        rows = self._session.execute(stmt).all()
        return {row.thread_id: int(row.unread_count) for row in rows}

    def soft_delete(self, *, message_id: int) -> bool:
        now = utcnow()
        stmt = (
            update(MessageModel)
            .where(MessageModel.id == message_id, MessageModel.deleted_at.is_(None))
            .values(deleted_at=now, updated_at=now)
        )
        res = self._session.execute(stmt)
        return (res.rowcount or 0) > 0
