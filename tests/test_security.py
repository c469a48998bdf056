"""Tests for password hashing and token signing helpers."""

from datetime import timedelta
from types import SimpleNamespace

import jwt
import pytest

from services.exceptions import SigningError, TokenError
from utils.security import (
    TokenSigner,
    digest_refresh_token,
    hash_password,
    verify_password,
)


class TestPasswordHashing:

    def test_hash_verifies_same_password(self):
        digest = hash_password("pw123456")
        assert verify_password("pw123456", digest) is True

    def test_hash_rejects_other_password(self):
        digest = hash_password("pw123456")
        assert verify_password("pw1234567", digest) is False

    def test_hash_is_salted(self):
        assert hash_password("pw123456") != hash_password("pw123456")

    @pytest.mark.parametrize("digest", ["", None, "not-an-argon2-hash", "$argon2id$v=19$garbage"])
    def test_malformed_digest_returns_false(self, digest):
        assert verify_password("pw123456", digest) is False


class TestTokenSigner:

    def _user(self, permissions=None):
        return SimpleNamespace(id="user-1", permissions=permissions or [])

    def test_sign_returns_access_and_opaque_refresh(self, signer):
        tokens = signer.sign(self._user(["users:read"]))

        claims = signer.decode_access_token(tokens.access_token)
        assert claims["sub"] == "user-1"
        assert claims["permissions"] == ["users:read"]
        assert claims["type"] == "access"
        assert tokens.permissions == ["users:read"]
        assert tokens.expires_in == 15 * 60
        # refresh token is random bytes, not a JWT
        assert tokens.refresh_token.count(".") != 2
        assert tokens.refresh_token != tokens.access_token

    def test_refresh_tokens_are_unique(self, signer):
        user = self._user()
        assert signer.sign(user).refresh_token != signer.sign(user).refresh_token

    def test_missing_secret_raises_signing_error(self):
        with pytest.raises(SigningError):
            TokenSigner(secret=None).sign(self._user())

    def test_wrong_secret_is_rejected(self, signer):
        token = TokenSigner(secret="another-secret").create_access_token("user-1")
        with pytest.raises(TokenError):
            signer.decode_access_token(token)

    def test_expired_token(self):
        signer = TokenSigner(secret="s3cret", access_ttl=timedelta(seconds=-30))
        token = signer.create_access_token("user-1")

        with pytest.raises(TokenError, match="expired"):
            signer.decode_access_token(token)
        assert signer.decode_access_token(token, verify_exp=False)["sub"] == "user-1"

    def test_wrong_token_type(self, signer):
        token = jwt.encode(
            {"sub": "user-1", "iat": 0, "exp": 4102444800, "iss": signer.issuer, "type": "refresh"},
            signer.secret,
            algorithm="HS256",
        )
        with pytest.raises(TokenError, match="Wrong token type"):
            signer.decode_access_token(token)


def test_refresh_digest_is_stable():
    assert digest_refresh_token("abc") == digest_refresh_token("abc")
    assert digest_refresh_token("abc") != digest_refresh_token("abd")
    assert len(digest_refresh_token("abc")) == 64
