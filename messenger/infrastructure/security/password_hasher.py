# messenger/infrastructure/security/password_hasher.py
import base64
import binascii
import hashlib
import hmac
import os
from dataclasses import dataclass

ALGO = "pbkdf2_sha256"
SALT_BYTES = 16
MIN_LENGTH = 8


@dataclass(frozen=True)
class PasswordDigest:
    hash: str
    salt: str
    algo: str
    iterations: int


def _derive(password: str, salt: bytes, iterations: int) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)


class PasswordHasher:
    def __init__(self, iterations: int) -> None:
        self._iterations = iterations

    def hash(self, password: str) -> PasswordDigest:
        if not password or len(password) < MIN_LENGTH:
            raise ValueError(f"Senha inválida (mín. {MIN_LENGTH} caracteres).")

        salt = os.urandom(SALT_BYTES)
        return PasswordDigest(
            hash=base64.b64encode(_derive(password, salt, self._iterations)).decode("ascii"),
            salt=base64.b64encode(salt).decode("ascii"),
            algo=ALGO,
            iterations=self._iterations,
        )

    def verify(self, password: str, digest: PasswordDigest) -> bool:
        if digest.algo != ALGO:
            return False

        try:
            salt = base64.b64decode(digest.salt, validate=True)
            expected = base64.b64decode(digest.hash, validate=True)
        except (binascii.Error, ValueError):
            return False

        return hmac.compare_digest(_derive(password, salt, digest.iterations), expected)

    def needs_rehash(self, digest: PasswordDigest) -> bool:
        # iterações configuradas mudaram desde o cadastro
        return digest.algo != ALGO or digest.iterations != self._iterations
