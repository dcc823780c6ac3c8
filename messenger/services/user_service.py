# messenger/services/user_service.py

from messenger.config.settings import settings
from messenger.core.clock import utcnow
from messenger.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from messenger.infrastructure.database.models.user_model import UserModel
from messenger.infrastructure.security.password_hasher import PasswordDigest, PasswordHasher
from messenger.repositories.company_repository import CompanyRepository
from messenger.repositories.user_repository import UserRepository


class UserService:
    def __init__(self, user_repository: UserRepository, company_repository: CompanyRepository) -> None:
        self._user_repository = user_repository
        self._company_repository = company_repository
        self._hasher = PasswordHasher(settings.password_iterations)

    def create_user(
        self,
        *,
        name: str,
        email: str,
        password: str,
        avatar_url: str | None = None,
        company_id: int | None = None,
    ) -> UserModel:
        email = email.strip().lower()
        if self._user_repository.get_by_email(email) is not None:
            raise ConflictError("Email já cadastrado.")

        if company_id is not None and self._company_repository.get_by_id(company_id) is None:
            raise NotFoundError("Empresa não encontrada.")

        digest = self._hasher.hash(password)

        model = UserModel(
            name=name.strip(),
            email=email,
            avatar_url=avatar_url,
            company_id=company_id,
            password_algo=digest.algo,
            password_iterations=digest.iterations,
            password_hash=digest.hash,
            password_salt=digest.salt,
        )
        return self._user_repository.add(model)

    def get_user(self, user_id: int) -> UserModel:
        user = self._user_repository.get_by_id(user_id)
        if user is None:
            raise NotFoundError("Usuário não encontrado.")
        return user

    def list_users(self, *, limit: int = 50, offset: int = 0) -> list[UserModel]:
        return self._user_repository.list_active(limit=limit, offset=offset)

    def list_other_users(self, *, user_id: int) -> list[UserModel]:
        return self._user_repository.list_active_excluding([user_id])

    def authenticate(self, *, email: str, password: str) -> UserModel:
        user = self._user_repository.get_by_email(email.strip().lower())
        if user is None:
            raise UnauthorizedError("Credenciais inválidas.")

        stored = PasswordDigest(
            hash=user.password_hash,
            salt=user.password_salt,
            algo=user.password_algo,
            iterations=user.password_iterations,
        )
        if not self._hasher.verify(password, stored):
            raise UnauthorizedError("Credenciais inválidas.")

        if self._hasher.needs_rehash(stored):
            digest = self._hasher.hash(password)
            user.password_algo = digest.algo
            user.password_iterations = digest.iterations
            user.password_hash = digest.hash
            user.password_salt = digest.salt
            user.updated_at = utcnow()

        user.last_login = utcnow()
        return user
