"""
AuthFlow: register / login / refresh / logout / password and profile changes.

Composes the password helpers, the TokenSigner and the TokenStore over an
injected DBStorage. Failures the client can act on are raised as
services.exceptions.AuthError subclasses; anything else propagates.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from sqlalchemy.exc import IntegrityError

from models.user import User, PROFILE_FIELDS
from services.exceptions import (
    EmailExists,
    InvalidCredentials,
    Unauthorized,
    OldPasswordIncorrect,
)
from services.token_store import TokenStore
from utils.security import (
    SignedTokens,
    TokenSigner,
    hash_password,
    verify_password,
    burn_verify,
)

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    user: User
    access_token: str
    refresh_token: str
    expires_in: int
    permissions: List[str]
    token_type: str = "bearer"


def normalize_email(email: str | None) -> str | None:
    return email.strip().lower() if isinstance(email, str) else email


class AuthFlow:
    def __init__(
        self,
        storage,
        signer: TokenSigner,
        token_store: TokenStore,
        revoke_sessions_on_password_change: bool = True,
    ):
        self.storage = storage
        self.signer = signer
        self.token_store = token_store
        self.revoke_sessions_on_password_change = revoke_sessions_on_password_change

    # lookups

    def find_by_email(self, email: str) -> User | None:
        session = self.storage.get_session()
        return session.query(User).filter(User.email == normalize_email(email)).first()

    def get_user(self, user_id: str) -> User | None:
        return self.storage.get(User, user_id)

    def _issue(self, user: User, tokens: SignedTokens | None = None) -> AuthResult:
        tokens = tokens or self.signer.sign(user)
        self.token_store.save(user, tokens.refresh_token)
        return AuthResult(
            user=user,
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            expires_in=tokens.expires_in,
            permissions=tokens.permissions,
        )

    # session lifecycle

    def register(self, email: str, password: str, **profile) -> AuthResult:
        email = normalize_email(email)
        if self.find_by_email(email):
            raise EmailExists()

        user = User(
            email=email,
            password_hash=hash_password(password),
            permissions=[],
            **{k: v for k, v in profile.items() if k in PROFILE_FIELDS},
        )
        # no user row is written unless tokens can be signed
        tokens = self.signer.sign(user)
        self.storage.new(user)
        try:
            self.storage.save()
        except IntegrityError:
            # lost the race against a concurrent register for the same email
            raise EmailExists()

        logger.info("Registered user %s", user.id)
        return self._issue(user, tokens)

    def login(self, email: str, password: str) -> AuthResult:
        user = self.find_by_email(email)
        if user is None:
            burn_verify(password)
            logger.info("Login rejected")
            raise InvalidCredentials()
        if not verify_password(password, user.password_hash):
            logger.info("Login rejected")
            raise InvalidCredentials()
        return self._issue(user)

    def refresh(self, user_id: str, presented_refresh_token: str | None) -> AuthResult:
        user = self.get_user(user_id)
        if user is None:
            raise Unauthorized()

        record = self.token_store.find_active(user, presented_refresh_token)
        if record is None:
            logger.warning("Refresh rejected for user %s: no active token", user.id)
            raise Unauthorized()

        tokens = self.signer.sign(user)
        if self.token_store.rotate(record, user, tokens.refresh_token) is None:
            raise Unauthorized()

        logger.info("Rotated refresh token for user %s", user.id)
        return AuthResult(
            user=user,
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            expires_in=tokens.expires_in,
            permissions=tokens.permissions,
        )

    def logout(self, user_id: str, presented_refresh_token: str | None) -> None:
        user = self.get_user(user_id)
        record = self.token_store.find_active(user, presented_refresh_token)
        if record is not None:
            self.token_store.destroy(record.id)

    # credentials and profile

    def change_password(self, user_id: str, old_password: str, new_password: str) -> None:
        user = self.get_user(user_id)
        if user is None:
            raise Unauthorized()
        if not verify_password(old_password, user.password_hash):
            raise OldPasswordIncorrect()

        user.password_hash = hash_password(new_password)
        self.storage.new(user)
        self.storage.save()

        if self.revoke_sessions_on_password_change:
            revoked = self.token_store.destroy_all(user.id)
            logger.info("Password changed for user %s, %d session(s) revoked", user.id, revoked)
        else:
            logger.info("Password changed for user %s", user.id)

    def get_profile(self, user_id: str) -> User:
        user = self.get_user(user_id)
        if user is None:
            raise Unauthorized()
        return user

    def update_profile(self, user_id: str, fields: dict) -> User:
        user = self.get_profile(user_id)
        for key, value in fields.items():
            if key in PROFILE_FIELDS:
                setattr(user, key, value)
        self.storage.new(user)
        self.storage.save()
        return user
