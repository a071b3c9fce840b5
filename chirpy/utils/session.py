"""
Session protocol and authorization guard.

Composes the password hasher, access token codec, refresh token store and
credential extractor into the login / renew / revoke flows and the
resource-ownership check. Each flow is a short sequence with no retries:
the first failure is raised to the caller.
"""
from __future__ import annotations

import functools
import hmac
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from chirpy.api.config import AuthSettings
from chirpy.models.base_model import utcnow
from chirpy.models.refresh_token import ACTIVE
from chirpy.utils.credentials import get_api_key, get_bearer_token
from chirpy.utils.errors import (
    Forbidden,
    InvalidCredentials,
    NotFound,
    RefreshTokenRejected,
    Unauthenticated,
)
from chirpy.utils.refresh_tokens import RefreshTokenStore, generate_refresh_token
from chirpy.utils.security import hash_password, issue_access_token, validate_access_token, verify_password

logger = logging.getLogger(__name__)


@functools.cache
def _dummy_hash() -> str:
    """Hash checked against when the email is unknown, so both failures cost one verify."""
    return hash_password("chirpy-unknown-user")


class UserLookup(Protocol):
    def get_user_by_email(self, email: str) -> Any: ...

    def get_user_by_id(self, user_id: str) -> Any: ...


@dataclass(frozen=True)
class LoginResult:
    user: Any
    access_token: str
    refresh_token: str


class SessionService:
    def __init__(self, settings: AuthSettings, users: UserLookup, refresh_tokens: RefreshTokenStore):
        self.settings = settings
        self.users = users
        self.refresh_tokens = refresh_tokens

    def login(self, email: str, password: str) -> LoginResult:
        """
        Verify the password, then mint an access token and store a new refresh token.
        Unknown email and wrong password are the same failure.
        """
        user = self.users.get_user_by_email(email)
        if user is None:
            # same argon2 cost as a real check
            verify_password(_dummy_hash(), password)
            raise InvalidCredentials("invalid credentials")
        if not verify_password(user.password_hash, password):
            raise InvalidCredentials("invalid credentials")

        access_token = issue_access_token(user.id, self.settings.signing_secret, self.settings.access_token_ttl)
        refresh_token = generate_refresh_token()
        self.refresh_tokens.store(refresh_token, user.id, self.settings.refresh_token_days)

        logger.info("user %s logged in", user.id)
        return LoginResult(user=user, access_token=access_token, refresh_token=refresh_token)

    def renew(self, headers: Mapping) -> str:
        """Mint a new access token from an active refresh token. The refresh token is not rotated."""
        token = get_bearer_token(headers)
        try:
            record = self.refresh_tokens.lookup(token)
        except NotFound as exc:
            raise RefreshTokenRejected("unknown refresh token") from exc

        state = record.state(utcnow())
        if state != ACTIVE:
            raise RefreshTokenRejected(f"refresh token {state}")

        logger.info("access token renewed for user %s", record.user_id)
        return issue_access_token(record.user_id, self.settings.signing_secret, self.settings.access_token_ttl)

    def revoke(self, headers: Mapping) -> None:
        token = get_bearer_token(headers)
        self.refresh_tokens.revoke(token)
        logger.info("refresh token revoked")

    def authenticate(self, headers: Mapping) -> str:
        """Return the user id carried by the bearer access token."""
        token = get_bearer_token(headers)
        return validate_access_token(token, self.settings.signing_secret)

    def authorize_owner(self, user_id: str, owner_id: str) -> None:
        if str(user_id) != str(owner_id):
            raise Forbidden("caller does not own the resource")

    def ensure_owner(self, headers: Mapping, owner_id: str) -> str:
        user_id = self.authenticate(headers)
        self.authorize_owner(user_id, owner_id)
        return user_id

    def check_api_key(self, headers: Mapping) -> None:
        key = get_api_key(headers)
        if not hmac.compare_digest(key.encode(), self.settings.api_key.encode()):
            raise Unauthenticated("api key mismatch")
