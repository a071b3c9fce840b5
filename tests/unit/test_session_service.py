"""Login / renew / revoke flows and the ownership guard, below the HTTP layer."""

from __future__ import annotations

import uuid
from dataclasses import FrozenInstanceError
from datetime import timedelta

import pytest

from chirpy.api.config import AuthSettings
from chirpy.models import storage
from chirpy.models.base_model import utcnow
from chirpy.models.refresh_token import ACTIVE, RefreshToken
from chirpy.utils.errors import (
    ConfigError,
    Forbidden,
    InvalidCredentials,
    MalformedHeader,
    MissingHeader,
    NotFound,
    RefreshTokenRejected,
    StorageError,
    Unauthenticated,
)
from chirpy.utils.security import issue_access_token, validate_access_token
from tests.helpers import JWT_SECRET, PASSWORD, POLKA_KEY, api_key, bearer


def test_login_issues_both_tokens(session_service, refresh_store, user) -> None:
    result = session_service.login(user.email, PASSWORD)

    assert result.user.id == user.id
    assert validate_access_token(result.access_token, JWT_SECRET) == user.id
    record = refresh_store.lookup(result.refresh_token)
    assert record.user_id == user.id
    assert record.state(utcnow()) == ACTIVE


def test_login_wrong_password(session_service, user) -> None:
    with pytest.raises(InvalidCredentials):
        session_service.login(user.email, "not the password")
    assert storage.count(RefreshToken) == 0


def test_login_unknown_email(session_service, user) -> None:
    with pytest.raises(InvalidCredentials):
        session_service.login("nobody@example.com", PASSWORD)


def test_login_unknown_email_still_runs_a_verify(session_service, user, monkeypatch) -> None:
    checked = []

    def recording_verify(password_hash, password):
        checked.append(password_hash)
        return False

    monkeypatch.setattr("chirpy.utils.session.verify_password", recording_verify)

    with pytest.raises(InvalidCredentials):
        session_service.login("nobody@example.com", PASSWORD)
    with pytest.raises(InvalidCredentials):
        session_service.login(user.email, "not the password")

    assert len(checked) == 2
    assert checked[0].startswith("$argon2")
    assert checked[0] != user.password_hash


def test_login_aborts_when_refresh_token_cannot_be_stored(session_service, user, monkeypatch) -> None:
    def broken_store(token, user_id, ttl_days):
        raise StorageError("database down")

    monkeypatch.setattr(session_service.refresh_tokens, "store", broken_store)
    with pytest.raises(StorageError):
        session_service.login(user.email, PASSWORD)


def test_renew_mints_access_token_without_rotation(session_service, user) -> None:
    result = session_service.login(user.email, PASSWORD)

    first = session_service.renew(bearer(result.refresh_token))
    second = session_service.renew(bearer(result.refresh_token))

    assert validate_access_token(first, JWT_SECRET) == user.id
    assert validate_access_token(second, JWT_SECRET) == user.id
    assert storage.count(RefreshToken) == 1


def test_renew_after_revoke_is_rejected(session_service, user) -> None:
    result = session_service.login(user.email, PASSWORD)
    session_service.revoke(bearer(result.refresh_token))

    with pytest.raises(RefreshTokenRejected):
        session_service.renew(bearer(result.refresh_token))


def test_renew_with_expired_token_is_rejected(session_service, user) -> None:
    result = session_service.login(user.email, PASSWORD)
    row = storage.get(RefreshToken, result.refresh_token)
    row.expires_at = utcnow() - timedelta(seconds=1)
    storage.save()

    assert row.revoked_at is None
    with pytest.raises(RefreshTokenRejected):
        session_service.renew(bearer(result.refresh_token))


def test_renew_with_unknown_token(session_service) -> None:
    with pytest.raises(RefreshTokenRejected):
        session_service.renew(bearer("f" * 64))


def test_renew_rejections_are_unauthenticated() -> None:
    assert issubclass(RefreshTokenRejected, Unauthenticated)
    assert issubclass(InvalidCredentials, Unauthenticated)


def test_revoke_unknown_token(session_service) -> None:
    with pytest.raises(NotFound):
        session_service.revoke(bearer("f" * 64))


def test_revoke_needs_header(session_service) -> None:
    with pytest.raises(MissingHeader):
        session_service.revoke({})


def test_authenticate(session_service, user) -> None:
    token = issue_access_token(user.id, JWT_SECRET, timedelta(minutes=1))
    assert session_service.authenticate(bearer(token)) == user.id


def test_ensure_owner(session_service, user) -> None:
    token = issue_access_token(user.id, JWT_SECRET, timedelta(minutes=1))

    assert session_service.ensure_owner(bearer(token), user.id) == user.id
    with pytest.raises(Forbidden):
        session_service.ensure_owner(bearer(token), str(uuid.uuid4()))


def test_ensure_owner_unauthenticated_is_not_forbidden(session_service, user) -> None:
    expired = issue_access_token(user.id, JWT_SECRET, timedelta(seconds=-5))
    with pytest.raises(Unauthenticated):
        session_service.ensure_owner(bearer(expired), user.id)


def test_check_api_key(session_service) -> None:
    session_service.check_api_key(api_key())
    with pytest.raises(Unauthenticated):
        session_service.check_api_key(api_key("wrong-key"))
    with pytest.raises(MalformedHeader):
        session_service.check_api_key(bearer(POLKA_KEY))


# --------------------------------------------------------------------------- #
# AuthSettings
# --------------------------------------------------------------------------- #


def test_settings_from_config() -> None:
    settings = AuthSettings.from_config(
        {
            "JWT_SECRET": JWT_SECRET,
            "POLKA_KEY": POLKA_KEY,
            "ACCESS_TOKEN_EXPIRES": timedelta(minutes=30),
            "REFRESH_TOKEN_DAYS": "7",
        }
    )
    assert settings.access_token_ttl == timedelta(minutes=30)
    assert settings.refresh_token_days == 7
    with pytest.raises(FrozenInstanceError):
        settings.signing_secret = "changed"


@pytest.mark.parametrize(
    "config",
    [
        {"JWT_SECRET": "", "POLKA_KEY": POLKA_KEY},
        {"POLKA_KEY": POLKA_KEY},
        {"JWT_SECRET": JWT_SECRET, "POLKA_KEY": ""},
        {"JWT_SECRET": JWT_SECRET},
    ],
)
def test_settings_require_secret_and_api_key(config: dict) -> None:
    with pytest.raises(ConfigError):
        AuthSettings.from_config(config)
