# messenger/api/routes/__init__.py

from flask import Flask

from messenger.api.routes.health_routes import bp_health
from messenger.api.routes.auth_routes import bp_auth
from messenger.api.routes.user_routes import bp_users
from messenger.api.routes.thread_routes import bp_messages


def register_routes(app: Flask, *, api_prefix: str, app_prefix: str) -> None:
    # health fora de /api (mas dentro do app)
    app.register_blueprint(bp_health, url_prefix=f"{app_prefix}/health")

    app.register_blueprint(bp_auth, url_prefix=f"{api_prefix}/auth")
    app.register_blueprint(bp_users, url_prefix=f"{api_prefix}/users")
    app.register_blueprint(bp_messages, url_prefix=f"{api_prefix}/messages")
