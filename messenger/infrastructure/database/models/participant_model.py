# messenger/infrastructure/database/models/participant_model.py

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from messenger.core.clock import utcnow
from messenger.infrastructure.database.base_model import BaseModel, BigIntPK


class ParticipantModel(BaseModel):
    __tablename__ = "tbParticipants"
    __table_args__ = (
        UniqueConstraint("thread_id", "user_id", name="uq_tbParticipants_thread_user"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)

    thread_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tbThreads.id"), nullable=False
    )

    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tbUsers.id"), nullable=False
    )

    company_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tbCompanies.id"), nullable=True
    )

    last_read: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=True)

    starred: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=True)

    # arquivado (soft delete)
    deleted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=True)
