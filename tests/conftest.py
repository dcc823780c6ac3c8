import os

# precisa vir antes de qualquer import do pacote (settings é lido no import)
os.environ["DB_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "false"
os.environ["PUSH_DRIVER"] = "none"
os.environ["SOCKETIO_ASYNC_MODE"] = "threading"
os.environ["PASSWORD_ITERATIONS"] = "1000"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["LOG_LEVEL"] = "WARNING"

from types import SimpleNamespace  # noqa: E402

import pytest  # noqa: E402

from messenger.core.interfaces.message_notifier import MessageCreatedEvent  # noqa: E402
from messenger.infrastructure.database.models.company_model import CompanyModel  # noqa: E402
from messenger.infrastructure.database.session import create_schema, db_session, drop_schema  # noqa: E402
from messenger.infrastructure.security.jwt_provider import JwtProvider  # noqa: E402
from messenger.main import create_app  # noqa: E402
from messenger.repositories.company_repository import CompanyRepository  # noqa: E402
from messenger.repositories.message_repository import MessageRepository  # noqa: E402
from messenger.repositories.participant_repository import ParticipantRepository  # noqa: E402
from messenger.repositories.thread_repository import ThreadRepository  # noqa: E402
from messenger.repositories.user_repository import UserRepository  # noqa: E402
from messenger.services.message_service import MessageService  # noqa: E402
from messenger.services.thread_service import ThreadService  # noqa: E402
from messenger.services.user_service import UserService  # noqa: E402


class RecordingNotifier:
    def __init__(self, *, fail: bool = False) -> None:
        self.events: list[MessageCreatedEvent] = []
        self.fail = fail

    def notify_message_created(self, event: MessageCreatedEvent) -> int:
        if self.fail:
            raise RuntimeError("push fora do ar")
        self.events.append(event)
        return len(event.recipient_ids)


@pytest.fixture(scope="session")
def app():
    app = create_app()
    app.config["TESTING"] = True
    return app


@pytest.fixture(autouse=True)
def db():
    drop_schema()
    create_schema()
    yield


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_company():
    def _make(name="Acme Ltda", logo_url="https://cdn.acme.com.br/logo.png") -> int:
        with db_session() as session:
            company = CompanyRepository(session).add(CompanyModel(name=name, logo_url=logo_url))
            return int(company.id)

    return _make


@pytest.fixture
def make_user():
    counter = {"n": 0}

    def _make(name=None, *, email=None, password="SenhaForte123", avatar_url=None, company_id=None) -> int:
        counter["n"] += 1
        n = counter["n"]
        with db_session() as session:
            user = UserService(UserRepository(session), CompanyRepository(session)).create_user(
                name=name or f"Usuario {n}",
                email=email or f"usuario{n}@acme.com.br",
                password=password,
                avatar_url=avatar_url,
                company_id=company_id,
            )
            return int(user.id)

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user_id: int) -> dict:
        token = JwtProvider().issue_access_token(subject=str(user_id))
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def uow(notifier):
    """Sessão aberta com os services montados; commit ao final do teste.

    O SQLite em memória usa uma única conexão (StaticPool): dentro de testes
    com ``uow`` os dados devem ser criados por ``uow.add_user``/``uow.add_company``,
    nunca por ``make_user`` (outra sessão na mesma conexão).
    """
    with db_session() as session:
        users = UserService(UserRepository(session), CompanyRepository(session))
        counter = {"n": 0}

        def add_user(name=None, *, company_id=None, avatar_url=None) -> int:
            counter["n"] += 1
            user = users.create_user(
                name=name or f"Usuario {counter['n']}",
                email=f"uow{counter['n']}@acme.com.br",
                password="SenhaForte123",
                avatar_url=avatar_url,
                company_id=company_id,
            )
            return int(user.id)

        def add_company(name="Acme Ltda", logo_url="https://cdn.acme.com.br/logo.png") -> int:
            return int(CompanyRepository(session).add(CompanyModel(name=name, logo_url=logo_url)).id)

        threads = ThreadService(
            thread_repo=ThreadRepository(session),
            part_repo=ParticipantRepository(session),
            msg_repo=MessageRepository(session),
            user_repo=UserRepository(session),
        )
        messages = MessageService(
            thread_repo=ThreadRepository(session),
            part_repo=ParticipantRepository(session),
            msg_repo=MessageRepository(session),
            user_repo=UserRepository(session),
            thread_service=threads,
            notifier=notifier,
        )
        yield SimpleNamespace(
            session=session,
            threads=threads,
            messages=messages,
            add_user=add_user,
            add_company=add_company,
        )
