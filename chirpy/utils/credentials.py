from __future__ import annotations

from collections.abc import Mapping

from chirpy.utils.errors import MalformedHeader, MissingHeader

BEARER_SCHEME = "bearer"
API_KEY_SCHEME = "apikey"


def _credential(headers: Mapping, scheme: str) -> str:
    auth = headers.get("Authorization") or ""
    if not auth.strip():
        raise MissingHeader("Authorization header not found")

    fields = auth.split()
    if len(fields) < 2 or fields[0].lower() != scheme:
        raise MalformedHeader("malformed Authorization header")
    return fields[1]


def get_bearer_token(headers: Mapping) -> str:
    """`Authorization: Bearer <token>` -> `<token>`"""
    return _credential(headers, BEARER_SCHEME)


def get_api_key(headers: Mapping) -> str:
    """`Authorization: ApiKey <key>` -> `<key>`"""
    return _credential(headers, API_KEY_SCHEME)
