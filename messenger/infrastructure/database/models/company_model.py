# messenger/infrastructure/database/models/company_model.py

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from messenger.core.clock import utcnow
from messenger.infrastructure.database.base_model import BaseModel, BigIntPK


class CompanyModel(BaseModel):
    __tablename__ = "tbCompanies"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)

    name: Mapped[str] = mapped_column(String(150), nullable=False)
    logo_url: Mapped[str] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    deleted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=True)
