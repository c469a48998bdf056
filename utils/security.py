"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT access tokens via PyJWT
- Opaque random refresh tokens (not JWTs) and their storage digest
"""
from __future__ import annotations

import hashlib
import secrets
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, List

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError

from services.exceptions import SigningError, TokenError

ph = PasswordHasher()

# Verified against when the account does not exist, so a miss costs the same
# as a wrong password.
_DUMMY_HASH = ph.hash(secrets.token_hex(16))


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2 (salt is embedded in the result)
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    """ Verify a plaintext password using argon2. Never raises.
    """
    if not password_hash or password is None:
        return False
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def burn_verify(password: str) -> None:
    """Spend one argon2 verification on a throwaway hash."""
    verify_password(password or "", _DUMMY_HASH)


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def generate_refresh_token() -> str:
    """Opaque refresh token value; carries no claims."""
    return secrets.token_urlsafe(48)


def digest_refresh_token(value: str) -> str:
    """SHA-256 hex digest used to store and look up refresh tokens."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SignedTokens:
    access_token: str
    refresh_token: str
    expires_in: int
    permissions: List[str] = field(default_factory=list)


class TokenSigner:
    """Issues access/refresh token pairs for a user.

    The secret is read once at construction; a missing secret only fails
    when something is actually signed or verified, raising SigningError.
    """

    def __init__(
        self,
        secret: str | None,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(minutes=15),
        issuer: str = "user-auth-api",
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.issuer = issuer

    def _require_secret(self) -> str:
        if not self.secret:
            raise SigningError("JWT secret is not configured")
        return self.secret

    def create_access_token(self, subject: str, permissions: List[str] | None = None) -> str:
        secret = self._require_secret()
        now = _now()
        payload = {
            "iss": self.issuer,
            "sub": str(subject),
            "iat": int(now.timestamp()),
            "exp": int((now + self.access_ttl).timestamp()),
            "type": "access",
            "jti": generate_jti(),
            "permissions": list(permissions or []),
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def sign(self, user) -> SignedTokens:
        permissions = list(user.permissions or [])
        access_token = self.create_access_token(user.id, permissions)
        return SignedTokens(
            access_token=access_token,
            refresh_token=generate_refresh_token(),
            expires_in=int(self.access_ttl.total_seconds()),
            permissions=permissions,
        )

    def decode_access_token(self, token: str, verify_exp: bool = True) -> Dict[str, Any]:
        """
        Decode and validate an access JWT. Raises TokenError on bad signature,
        expiry (unless verify_exp is False), wrong issuer or wrong type.
        """
        secret = self._require_secret()
        try:
            decoded = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"verify_exp": verify_exp, "require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenError("Token expired")
        except jwt.InvalidTokenError as exc:
            raise TokenError(f"Invalid token: {exc}")

        if decoded.get("type") != "access":
            raise TokenError("Wrong token type")
        return decoded
