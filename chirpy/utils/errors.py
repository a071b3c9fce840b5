"""
Tagged errors for the authentication and session-token subsystem.

These exceptions carry no Flask or HTTP knowledge; ``chirpy.api.errors``
translates them to responses. Callers branch on the class, never on the
message text.

Hierarchy:
- AuthError
  - InputMalformed -> MalformedHeader
  - Unauthenticated -> MissingHeader, InvalidCredentials, RefreshTokenRejected,
    TokenError -> MalformedToken, BadSignature, Expired, InvalidSubject
  - Forbidden
  - NotFound
  - StorageError
  - ConfigError
  - HashingError
  - EntropyError
"""
from __future__ import annotations


class AuthError(Exception):
    """Base class for every error raised by the auth core."""


class InputMalformed(AuthError):
    """The request carried data of the wrong shape (client error)."""


class MalformedHeader(InputMalformed):
    """Authorization header present but not `<scheme> <credential>`."""


class Unauthenticated(AuthError):
    """The caller could not be authenticated. Cause is never shown to clients."""


class MissingHeader(Unauthenticated):
    """No Authorization header was sent."""


class InvalidCredentials(Unauthenticated):
    """Unknown email or wrong password."""


class RefreshTokenRejected(Unauthenticated):
    """Refresh token unknown, revoked or expired."""


class TokenError(Unauthenticated):
    """Base class for access token validation failures."""


class MalformedToken(TokenError):
    pass


class BadSignature(TokenError):
    pass


class Expired(TokenError):
    pass


class InvalidSubject(TokenError):
    pass


class Forbidden(AuthError):
    """Authenticated, but the caller does not own the resource."""


class NotFound(AuthError):
    """The referenced row does not exist (or no row was affected)."""


class StorageError(AuthError):
    """Persistence layer failure. Detail is logged, never returned."""


class ConfigError(AuthError):
    """Required configuration is missing or empty."""


class HashingError(AuthError):
    """The password hasher failed to produce a hash."""


class EntropyError(AuthError):
    """
    The secure random source failed.
    Not recoverable: the HTTP boundary terminates the process on it.
    """
