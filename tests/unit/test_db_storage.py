"""Classifying IntegrityErrors raised through the storage facade."""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.exc import IntegrityError

from chirpy.models import storage
from chirpy.models.base_model import utcnow
from chirpy.models.db_storage import is_unique_violation
from chirpy.models.refresh_token import RefreshToken
from chirpy.models.user import User


def _integrity_error(obj) -> IntegrityError:
    storage.new(obj)
    with pytest.raises(IntegrityError) as excinfo:
        storage.save()
    return excinfo.value


def test_duplicate_email_is_unique_violation(app, user) -> None:
    err = _integrity_error(User(email=user.email, password_hash=user.password_hash))
    assert is_unique_violation(err) is True


def test_foreign_key_failure_is_not_unique_violation(app) -> None:
    now = utcnow()
    row = RefreshToken(
        token="ab" * 32, user_id=str(uuid.uuid4()), created_at=now, updated_at=now, expires_at=now
    )
    err = _integrity_error(row)
    assert is_unique_violation(err) is False
