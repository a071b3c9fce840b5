"""
RefreshToken model: opaque refresh tokens keyed by their own value.
Fields:
- token (primary key, 64 lowercase hex chars)
- user_id (String(36)) - FK to users.id
- created_at, updated_at
- expires_at (fixed at creation)
- revoked_at (NULL while active, never cleared once set)
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String

from chirpy.models.base_model import Base, as_utc

ACTIVE = "active"
EXPIRED = "expired"
REVOKED = "revoked"


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    token = Column(String(64), primary_key=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    revoked_at = Column(DateTime(timezone=True), nullable=True)

    def state(self, now: datetime) -> str:
        """Revoked wins over expired; both are terminal."""
        if self.revoked_at is not None:
            return REVOKED
        if now >= as_utc(self.expires_at):
            return EXPIRED
        return ACTIVE

    def is_active(self, now: datetime) -> bool:
        return self.state(now) == ACTIVE

    def __repr__(self):
        # never print the token itself
        return f"<RefreshToken user_id={self.user_id} expires_at={self.expires_at}>"
