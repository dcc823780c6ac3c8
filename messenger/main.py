# messenger/main.py
from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from messenger.api.realtime.socket_handlers import register_socket_handlers
from messenger.infrastructure.realtime.socketio_server import socketio
from messenger.config.flask_config import configure_app
from messenger.config.settings import settings
from messenger.api.routes import register_routes
from messenger.api.middlewares.error_handler import register_error_handlers
from messenger.infrastructure.database.session import create_schema

import messenger.infrastructure.database.models  # noqa: F401


APP_PREFIX = settings.app_prefix.rstrip("/")
API_PREFIX = settings.api_prefix
SOCKET_PREFIX = f"{APP_PREFIX}/socket.io"


def create_app() -> Flask:
    app = Flask(__name__)

    # CORS antes das rotas lidarem com OPTIONS
    CORS(
        app,
        resources={rf"{API_PREFIX}/*": {"origins": settings.cors_origins}},
        allow_headers=["Content-Type", "Authorization"],
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    )

    configure_app(app)

    if settings.db_auto_create:
        create_schema()

    register_routes(app, api_prefix=API_PREFIX, app_prefix=APP_PREFIX)

    register_error_handlers(app)

    socketio.init_app(app, path=SOCKET_PREFIX)
    register_socket_handlers()

    app.logger.info("messenger pronto (push_driver=%s, api=%s)", settings.push_driver, API_PREFIX)
    return app
