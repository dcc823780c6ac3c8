# messenger/api/routes/user_routes.py

from __future__ import annotations

from flask import Blueprint, jsonify, request

from messenger.api.middlewares.auth_middleware import current_user_id, require_auth
from messenger.api.schemas.user_schema import CreateUserRequest, UserResponse
from messenger.infrastructure.database.session import db_session
from messenger.repositories.company_repository import CompanyRepository
from messenger.repositories.user_repository import UserRepository
from messenger.services.user_service import UserService

bp_users = Blueprint("users", __name__, url_prefix="/users")


def _build_service(session) -> UserService:
    return UserService(UserRepository(session), CompanyRepository(session))


def _to_response(user) -> dict:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        avatar_url=user.avatar_url,
        company_id=user.company_id,
    ).model_dump()


@bp_users.post("")
def create_user():
    payload = CreateUserRequest.model_validate(request.get_json(force=True))

    with db_session() as session:
        created = _build_service(session).create_user(**payload.model_dump())
        response = _to_response(created)

    return jsonify(response), 201


@bp_users.get("")
@require_auth
def list_users():
    limit = max(1, min(int(request.args.get("limit", 50)), 200))
    offset = max(0, int(request.args.get("offset", 0)))

    with db_session() as session:
        users = _build_service(session).list_users(limit=limit, offset=offset)
        response = [_to_response(u) for u in users]

    return jsonify(response), 200


@bp_users.get("/me")
@require_auth
def me():
    with db_session() as session:
        response = _to_response(_build_service(session).get_user(current_user_id()))

    return jsonify(response), 200
