"""
RefreshToken model: one row per issued refresh token (one per session/device).
Fields:
- id (primary key)
- user_id (String(36)) - FK to users.id, cascades on user delete
- token_hash - SHA-256 hex of the opaque token value; the value itself is never stored
- issued_at, expires_at
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base, utcnow


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token_hash = Column(String(64), nullable=False, unique=True)
    issued_at = Column(DateTime, nullable=False, default=utcnow)
    expires_at = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="refresh_tokens")

    __table_args__ = (
        Index("ix_refresh_tokens_user_token", "user_id", "token_hash"),
    )

    def __repr__(self):
        return f"<RefreshToken user={self.user_id} expires={self.expires_at}>"
