"""Shared constants and small helpers for the test suite."""

from __future__ import annotations

JWT_SECRET = "test-signing-secret-0123456789abcdef0123456789"
POLKA_KEY = "f271c81ff7084ee5b99a5091b42d486e"
PASSWORD = "correct horse battery"


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def api_key(key: str = POLKA_KEY) -> dict[str, str]:
    return {"Authorization": f"ApiKey {key}"}
