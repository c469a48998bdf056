"""CRUD over user records for the administration endpoints."""
from __future__ import annotations

import logging
from typing import List, Tuple

from sqlalchemy.exc import IntegrityError

from models.user import User, PROFILE_FIELDS
from services.auth_flow import normalize_email
from services.exceptions import EmailExists, UserNotFound
from services.token_store import TokenStore
from utils.security import hash_password

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("email",) + PROFILE_FIELDS


class UserAdmin:
    def __init__(self, storage, token_store: TokenStore):
        self.storage = storage
        self.token_store = token_store

    def _email_taken(self, email: str, exclude_id: str | None = None) -> bool:
        query = self.storage.get_session().query(User).filter(User.email == email)
        if exclude_id:
            query = query.filter(User.id != exclude_id)
        return query.first() is not None

    def _commit(self):
        try:
            self.storage.save()
        except IntegrityError:
            raise EmailExists()

    def list_users(self, page: int, limit: int) -> Tuple[List[User], int]:
        query = self.storage.get_session().query(User)
        total = query.count()
        rows = (
            query.order_by(User.created_at.desc(), User.email.asc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return rows, total

    def get_user(self, user_id: str) -> User:
        user = self.storage.get(User, user_id)
        if user is None:
            raise UserNotFound()
        return user

    def create_user(self, email: str, password: str, **profile) -> User:
        email = normalize_email(email)
        if self._email_taken(email):
            raise EmailExists()
        user = User(
            email=email,
            password_hash=hash_password(password),
            permissions=[],
            **{k: v for k, v in profile.items() if k in PROFILE_FIELDS},
        )
        self.storage.new(user)
        self._commit()
        logger.info("Created user %s", user.id)
        return user

    def update_user(self, user_id: str, fields: dict) -> User:
        user = self.get_user(user_id)
        if "email" in fields:
            email = normalize_email(fields["email"])
            if email != user.email and self._email_taken(email, exclude_id=user.id):
                raise EmailExists()
            fields = dict(fields, email=email)
        for key, value in fields.items():
            if key in EDITABLE_FIELDS:
                setattr(user, key, value)
        self.storage.new(user)
        self._commit()
        return user

    def set_password(self, user_id: str, password: str) -> User:
        user = self.get_user(user_id)
        user.password_hash = hash_password(password)
        self.storage.new(user)
        self.storage.save()
        self.token_store.destroy_all(user.id)
        logger.info("Password reset for user %s", user.id)
        return user

    def delete_user(self, user_id: str) -> None:
        user = self.get_user(user_id)
        self.storage.delete(user)
        self.storage.save()
        logger.info("Deleted user %s", user_id)
