# messenger/api/middlewares/auth_middleware.py
from functools import wraps
from typing import Any, Callable, TypeVar

from flask import g, request

from messenger.core.exceptions import UnauthorizedError
from messenger.infrastructure.security.jwt_provider import JwtProvider

F = TypeVar("F", bound=Callable[..., Any])


def bearer_token(headers, args=None) -> str | None:
    """Token do header ``Authorization: Bearer`` ou, se informado, de ``?token=``."""
    parts = headers.get("Authorization", "").split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    if args is not None and args.get("token"):
        return str(args["token"]).strip()
    return None


def require_auth(fn: F) -> F:
    @wraps(fn)
    def wrapper(*args, **kwargs):
        token = bearer_token(request.headers)
        if not token:
            raise UnauthorizedError("Token ausente.")

        g.user_id = JwtProvider().user_id(token)
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_user_id() -> int:
    user_id = getattr(g, "user_id", None)
    if user_id is None:
        raise UnauthorizedError("Token ausente.")
    return int(user_id)
