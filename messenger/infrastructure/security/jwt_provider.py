# messenger/infrastructure/security/jwt_provider.py

from datetime import timedelta
from uuid import uuid4

import jwt

from messenger.config.settings import settings
from messenger.core.clock import utcnow
from messenger.core.exceptions import UnauthorizedError

ACCESS = "access"
_ALGORITHM = "HS256"


class JwtProvider:
    """Tokens de acesso HS256; ``sub`` carrega o id do usuário."""

    def __init__(self, secret: str | None = None) -> None:
        self._secret = secret or settings.jwt_secret

    def issue_access_token(self, *, subject: str, payload: dict | None = None, minutes: int = 0) -> str:
        now = utcnow()
        ttl = timedelta(minutes=minutes if minutes > 0 else settings.jwt_access_minutes)

        claims = dict(payload or {})
        claims.update(
            iss=settings.jwt_issuer,
            aud=settings.jwt_audience,
            sub=str(subject),
            iat=int(now.timestamp()),
            exp=int((now + ttl).timestamp()),
            jti=uuid4().hex,
            typ=ACCESS,
        )
        return jwt.encode(claims, self._secret, algorithm=_ALGORITHM)

    def decode(self, token: str, *, expected_type: str = ACCESS) -> dict:
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                audience=settings.jwt_audience,
                issuer=settings.jwt_issuer,
                options={"require": ["exp", "sub", "typ"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise UnauthorizedError("Token expirado.") from e
        except jwt.InvalidTokenError as e:
            raise UnauthorizedError("Token inválido.") from e

        if claims.get("typ") != expected_type:
            raise UnauthorizedError("Token inválido.")
        return claims

    def user_id(self, token: str) -> int:
        claims = self.decode(token)
        try:
            return int(claims["sub"])
        except ValueError as e:
            raise UnauthorizedError("Token inválido.") from e
