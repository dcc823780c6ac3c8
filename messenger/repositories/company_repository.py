# messenger/repositories/company_repository.py

from sqlalchemy import select
from sqlalchemy.orm import Session

from messenger.core.base_repository import BaseRepository
from messenger.infrastructure.database.models.company_model import CompanyModel


class CompanyRepository(BaseRepository[CompanyModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def get_by_id(self, company_id: int) -> CompanyModel | None:
        stmt = select(CompanyModel).where(CompanyModel.id == company_id, CompanyModel.deleted_at.is_(None))
        return self._session.execute(stmt).scalar_one_or_none()
