# messenger/infrastructure/database/models/message_model.py

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column

from messenger.core.clock import utcnow
from messenger.infrastructure.database.base_model import BaseModel, BigIntPK


class MessageModel(BaseModel):
    __tablename__ = "tbMessages"
    __table_args__ = (
        Index("ix_tbMessages_thread_created", "thread_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)

    thread_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tbThreads.id"), nullable=False
    )

    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tbUsers.id"), nullable=False
    )

    # preenchido quando a mensagem foi enviada em nome da empresa
    company_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tbCompanies.id"), nullable=True
    )

    body: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    deleted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
