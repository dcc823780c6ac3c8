import pytest

from messenger.core.exceptions import UnauthorizedError
from messenger.infrastructure.security.jwt_provider import JwtProvider
from messenger.infrastructure.security.password_hasher import PasswordHasher


def test_hash_and_verify():
    hasher = PasswordHasher(1000)
    digest = hasher.hash("SenhaForte123")

    assert digest.iterations == 1000
    assert hasher.verify("SenhaForte123", digest)
    assert not hasher.verify("outra-senha", digest)
    assert not hasher.needs_rehash(digest)
    assert PasswordHasher(2000).needs_rehash(digest)


def test_short_password_is_rejected():
    with pytest.raises(ValueError):
        PasswordHasher(1000).hash("curta")


def test_token_roundtrip_carries_user_id():
    provider = JwtProvider()
    token = provider.issue_access_token(subject="42", payload={"name": "Ana"})

    assert provider.user_id(token) == 42
    assert provider.decode(token)["name"] == "Ana"


def test_token_signed_with_other_secret_is_rejected():
    token = JwtProvider(secret="outro-segredo").issue_access_token(subject="1")

    with pytest.raises(UnauthorizedError):
        JwtProvider().decode(token)


def test_token_of_other_type_is_rejected():
    token = JwtProvider().issue_access_token(subject="1", payload={"typ": "refresh"})

    # typ é sempre sobrescrito para access
    assert JwtProvider().decode(token)["typ"] == "access"
    with pytest.raises(UnauthorizedError):
        JwtProvider().decode(token, expected_type="refresh")
