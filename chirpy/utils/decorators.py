from __future__ import annotations

from functools import wraps

from flask import current_app, g, request

SESSION_EXTENSION = "chirpy.session"


def get_session_service():
    """The SessionService built by create_app()"""
    return current_app.extensions[SESSION_EXTENSION]


def jwt_required():
    """
    Require a valid access token; exposes the caller's id as g.current_user_id.
    Auth errors propagate to the handlers in chirpy.api.errors.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            g.current_user_id = get_session_service().authenticate(request.headers)
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def api_key_required():
    """Require `Authorization: ApiKey <key>` matching the configured webhook key."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            get_session_service().check_api_key(request.headers)
            return fn(*args, **kwargs)

        return wrapper

    return decorator
