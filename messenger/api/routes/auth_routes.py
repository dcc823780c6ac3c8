# messenger/api/routes/auth_routes.py
import logging

from flask import Blueprint, jsonify, request

from messenger.api.schemas.user_schema import LoginRequest, TokenResponse
from messenger.infrastructure.database.session import db_session
from messenger.infrastructure.security.jwt_provider import JwtProvider
from messenger.repositories.company_repository import CompanyRepository
from messenger.repositories.user_repository import UserRepository
from messenger.services.user_service import UserService

logger = logging.getLogger(__name__)

bp_auth = Blueprint("auth", __name__, url_prefix="/auth")


@bp_auth.post("/login")
def login():
    payload = LoginRequest.model_validate(request.get_json(force=True))

    with db_session() as session:
        user_service = UserService(UserRepository(session), CompanyRepository(session))
        user = user_service.authenticate(email=payload.email, password=payload.password)

        access = JwtProvider().issue_access_token(
            subject=str(user.id),
            payload={"email": user.email, "name": user.name},
        )
        logger.info("login user=%s", user.id)

    return jsonify(TokenResponse(access_token=access).model_dump()), 200
