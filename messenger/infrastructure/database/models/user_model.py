# messenger/infrastructure/database/models/user_model.py

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from messenger.core.clock import utcnow
from messenger.infrastructure.database.base_model import BaseModel, BigIntPK


class UserModel(BaseModel):
    __tablename__ = "tbUsers"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(150), nullable=False, unique=True)
    avatar_url: Mapped[str] = mapped_column(String(500), nullable=True)

    # empresa em nome da qual o usuário pode enviar mensagens
    company_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("tbCompanies.id"), nullable=True
    )

    password_algo: Mapped[str] = mapped_column(String(50), nullable=False)
    password_iterations: Mapped[int] = mapped_column(nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    password_salt: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=True)
    last_login: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=True)

    deleted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=True)
