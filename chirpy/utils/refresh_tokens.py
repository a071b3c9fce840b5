"""
Opaque refresh tokens: generation and their persisted lifecycle.

A token is Active until it is revoked (explicit, via revoke()) or its
expires_at passes (implicit, evaluated at read time). Both are terminal.
"""
from __future__ import annotations

import logging
import secrets
from datetime import timedelta

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from chirpy.models.base_model import utcnow
from chirpy.models.refresh_token import RefreshToken
from chirpy.utils.errors import EntropyError, NotFound, StorageError

logger = logging.getLogger(__name__)

REFRESH_TOKEN_BYTES = 32


def generate_refresh_token() -> str:
    """Return 32 random bytes from the OS CSPRNG as 64 lowercase hex chars."""
    try:
        return secrets.token_hex(REFRESH_TOKEN_BYTES)
    except (OSError, NotImplementedError) as exc:
        raise EntropyError("secure random source unavailable") from exc


class RefreshTokenStore:
    """Single-row reads and writes against the refresh_tokens table."""

    def __init__(self, storage):
        self.storage = storage

    def store(self, token: str, user_id: str, ttl_days: int) -> RefreshToken:
        now = utcnow()
        row = RefreshToken(
            token=token,
            user_id=str(user_id),
            created_at=now,
            updated_at=now,
            expires_at=now + timedelta(days=ttl_days),
            revoked_at=None,
        )
        try:
            self.storage.new(row)
            self.storage.save()
        except SQLAlchemyError as exc:
            logger.exception("storing refresh token for user %s failed", user_id)
            raise StorageError("could not store refresh token") from exc
        return row

    def lookup(self, token: str) -> RefreshToken:
        try:
            row = self.storage.get(RefreshToken, token)
        except SQLAlchemyError as exc:
            self.storage.rollback()
            logger.exception("refresh token lookup failed")
            raise StorageError("could not read refresh token") from exc
        if row is None:
            raise NotFound("refresh token not found")
        return row

    def revoke(self, token: str) -> None:
        """
        Set revoked_at on an active row. Unknown and already revoked tokens
        affect zero rows and raise NotFound.
        """
        now = utcnow()
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.token == token, RefreshToken.revoked_at.is_(None))
            .values(revoked_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        session = self.storage.get_session()
        try:
            result = session.execute(stmt)
            self.storage.save()
        except SQLAlchemyError as exc:
            self.storage.rollback()
            logger.exception("revoking refresh token failed")
            raise StorageError("could not revoke refresh token") from exc

        if result.rowcount == 0:
            raise NotFound("refresh token not found")
        # keep an already loaded row in step with the database
        session.expire_all()
