# messenger/config/settings.py
import os
from urllib.parse import quote_plus
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator


class Settings(BaseSettings):
    # Banco principal (PostgreSQL); db_url sobrescreve tudo (ex: sqlite:// nos testes)
    db_url: str | None = None
    db_host: str | None = None
    db_port: int = 5432
    db_name: str | None = None
    db_user: str | None = None
    db_password: str | None = None
    db_auto_create: bool = False

    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    app_prefix: str = ""
    cors_origins_raw: str = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:5173,http://127.0.0.1:5173",
    )

    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret-change-me")
    jwt_access_minutes: int = int(os.getenv("JWT_ACCESS_MINUTES", "60"))
    jwt_issuer: str = os.getenv("JWT_ISSUER", "messenger-api")
    jwt_audience: str = os.getenv("JWT_AUDIENCE", "messenger-front")

    # socketio | pusher | none
    push_driver: str = "socketio"
    socketio_async_mode: str = "eventlet"

    pusher_app_id: str | None = None
    pusher_key: str | None = None
    pusher_secret: str | None = None
    pusher_cluster: str = "mt1"
    pusher_ssl: bool = True

    password_iterations: int = 600_000

    message_preview_length: int = 50
    default_max_participants: int | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("db_host", "db_name", "db_user", "db_password", mode="before")
    @classmethod
    def strip_strings(cls, v):
        if isinstance(v, str):
            return v.strip().strip('"').strip("'")
        return v

    @field_validator("push_driver", mode="before")
    @classmethod
    def normalize_push_driver(cls, v):
        value = str(v or "none").strip().lower()
        if value not in ("socketio", "pusher", "none"):
            raise ValueError("push_driver deve ser socketio, pusher ou none.")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v):
        return str(v or "INFO").strip().upper()

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins_raw.split(",") if o.strip()]

    @property
    def api_prefix(self) -> str:
        return f"{self.app_prefix.rstrip('/')}/api"

    @property
    def database_url(self) -> str:
        if self.db_url:
            return self.db_url

        user = quote_plus(self.db_user or "")
        password = quote_plus(self.db_password or "")
        host = self.db_host or "localhost"
        port = self.db_port
        db = self.db_name or "messenger"

        return f"postgresql+psycopg2://{user}:{password}@{host}:{port}/{db}"

    @property
    def push_enabled(self) -> bool:
        return self.push_driver != "none"


settings = Settings()
