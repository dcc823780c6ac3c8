# messenger/infrastructure/database/models/thread_model.py

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from messenger.core.clock import utcnow
from messenger.infrastructure.database.base_model import BaseModel, BigIntPK


class ThreadModel(BaseModel):
    __tablename__ = "tbThreads"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)

    subject: Mapped[str] = mapped_column(String(255), nullable=False)

    # NULL = sem limite de participantes
    max_participants: Mapped[int] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    # sempre preenchido; atualizado a cada mensagem gravada (touch)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    deleted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=True)
