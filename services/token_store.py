"""
TokenStore: persistence of refresh tokens.

Every issued refresh token is its own row, so sessions on different
devices never interfere. Rotation of one row is a single transaction:
the old row is deleted and the new one inserted together, or not at all.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError

from models.base_model import utcnow
from models.refresh_token import RefreshToken
from utils.security import digest_refresh_token

logger = logging.getLogger(__name__)


class TokenStore:
    def __init__(self, storage, refresh_ttl: timedelta):
        self.storage = storage
        self.refresh_ttl = refresh_ttl

    def _build(self, user, value: str, now: datetime | None = None) -> RefreshToken:
        issued_at = now or utcnow()
        return RefreshToken(
            user_id=user.id,
            token_hash=digest_refresh_token(value),
            issued_at=issued_at,
            expires_at=issued_at + self.refresh_ttl,
        )

    def save(self, user, value: str) -> RefreshToken:
        """Insert a refresh token row for user and commit."""
        record = self._build(user, value)
        self.storage.new(record)
        self.storage.save()
        return record

    def find_active(self, user, value: str | None) -> RefreshToken | None:
        """Non-expired row matching both user and token value, else None."""
        if user is None or not value:
            return None
        session = self.storage.get_session()
        return (
            session.query(RefreshToken)
            .filter(
                RefreshToken.user_id == user.id,
                RefreshToken.token_hash == digest_refresh_token(value),
                RefreshToken.expires_at > utcnow(),
            )
            .first()
        )

    def destroy(self, record_id: str) -> None:
        """Delete one row. Deleting a row that is already gone is a no-op."""
        session = self.storage.get_session()
        try:
            session.execute(
                delete(RefreshToken)
                .where(RefreshToken.id == record_id)
                .execution_options(synchronize_session=False)
            )
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            raise

    def rotate(self, record: RefreshToken, user, new_value: str) -> RefreshToken | None:
        """
        Replace record with a new row for new_value in one transaction.
        Returns None, inserting nothing, when record was already consumed.
        """
        session = self.storage.get_session()
        # read before the delete; a rollback expires record and its row may be gone
        record_id = record.id
        try:
            result = session.execute(
                delete(RefreshToken)
                .where(RefreshToken.id == record_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                session.rollback()
                self._forget(session, record)
                logger.warning("Refresh token %s already consumed", record_id)
                return None
            replacement = self._build(user, new_value)
            session.add(replacement)
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            raise
        self._forget(session, record)
        return replacement

    @staticmethod
    def _forget(session, record):
        if record in session:
            session.expunge(record)

    def destroy_all(self, user_id: str) -> int:
        """Delete every refresh token of a user; returns the number removed."""
        session = self.storage.get_session()
        try:
            result = session.execute(
                delete(RefreshToken)
                .where(RefreshToken.user_id == user_id)
                .execution_options(synchronize_session=False)
            )
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            raise
        return result.rowcount

    def purge_expired(self) -> int:
        session = self.storage.get_session()
        try:
            result = session.execute(
                delete(RefreshToken)
                .where(RefreshToken.expires_at <= utcnow())
                .execution_options(synchronize_session=False)
            )
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            raise
        return result.rowcount
