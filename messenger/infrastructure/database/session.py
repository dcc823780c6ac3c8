# messenger/infrastructure/database/session.py

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from messenger.config.settings import settings
from messenger.infrastructure.database.base_model import BaseModel


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # banco em memória compartilhado entre threads (testes/dev)
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {"pool_pre_ping": True}


_engine = create_engine(
    settings.database_url,
    echo=settings.debug and settings.environment != "test",
    **_engine_kwargs(settings.database_url),
)

_SessionLocal = sessionmaker(
    bind=_engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)


@contextmanager
def db_session() -> Iterator[Session]:
    session: Session = _SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_schema() -> None:
    import messenger.infrastructure.database.models  # noqa: F401

    BaseModel.metadata.create_all(_engine)


def drop_schema() -> None:
    import messenger.infrastructure.database.models  # noqa: F401

    BaseModel.metadata.drop_all(_engine)
