"""
security helpers:
- Argon2 password hashing via argon2-cffi
- access token (JWT, HS256) creation/validation via PyJWT
"""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import HashingError as Argon2HashingError
from argon2.exceptions import InvalidHashError, VerificationError
from jwt.exceptions import InvalidSubjectError

from chirpy.utils.errors import (
    BadSignature,
    ConfigError,
    Expired,
    HashingError,
    InvalidSubject,
    MalformedToken,
)

JWT_ISSUER = "chirpy"
JWT_ALGORITHM = "HS256"

ph = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2 (salt and parameters are embedded)
    """
    try:
        return ph.hash(password)
    except (Argon2HashingError, UnicodeError) as exc:
        raise HashingError("could not hash password") from exc


def verify_password(password_hash: str, password: str) -> bool:
    """Verify a plaintext password against an Argon2 hash.

    Wrong password, malformed hash and empty input all return False.
    Input that cannot be encoded (non-ASCII hash, lone surrogates) is a mismatch too.
    """
    if not password or not password_hash:
        return False
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError, UnicodeError):
        return False


def _now() -> datetime:
    return datetime.now(timezone.utc)


def issue_access_token(user_id: str, secret: str, ttl: timedelta) -> str:
    """
    Sign a short-lived access token for `user_id`.
    A non-positive ttl yields a token that is already expired.
    """
    if not secret:
        raise ConfigError("empty signing secret")

    now = _now()
    payload = {
        "iss": JWT_ISSUER,
        "sub": str(user_id),
        "iat": now,
        "exp": now + ttl,
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def validate_access_token(token: str, secret: str) -> str:
    """
    Decode and validate an access token, returning the user id it was issued to.
    Raises a TokenError subclass on any failure.
    """
    if not secret:
        raise ConfigError("empty signing secret")

    try:
        decoded = jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALGORITHM],
            issuer=JWT_ISSUER,
            options={"require": ["iss", "sub", "iat", "exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise Expired("token expired") from exc
    except jwt.InvalidSignatureError as exc:
        raise BadSignature("signature mismatch") from exc
    except InvalidSubjectError as exc:
        raise InvalidSubject("subject is not a string") from exc
    except jwt.InvalidTokenError as exc:
        raise MalformedToken(f"invalid token: {exc}") from exc

    try:
        return str(uuid.UUID(str(decoded["sub"])))
    except ValueError as exc:
        raise InvalidSubject("subject is not a user id") from exc
