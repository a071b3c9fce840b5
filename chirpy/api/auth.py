"""
Authentication blueprint:
- POST /login    email + password -> user, access token and refresh token
- POST /refresh  Bearer <refresh token> -> new access token
- POST /revoke   Bearer <refresh token> -> 204

Access tokens are HS256 JWTs and are never stored. Refresh tokens are opaque,
stored in the refresh_tokens table and are not rotated on refresh.
"""
from __future__ import annotations

from flask import Blueprint, jsonify, request

from chirpy.models.schemas.user import LoginOutSchema, UserLoginSchema
from chirpy.utils.decorators import get_session_service

bp = Blueprint("auth", __name__)

user_login_schema = UserLoginSchema()
login_out_schema = LoginOutSchema()


@bp.post("/login")
def login():
    """
    Login: return the user with token and refresh_token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Unauthorized
    """
    payload = request.get_json(silent=True) or {}
    data = user_login_schema.load(payload)

    result = get_session_service().login(data["email"], data["password"])
    out = login_out_schema.dump(
        {
            "id": result.user.id,
            "created_at": result.user.created_at,
            "updated_at": result.user.updated_at,
            "email": result.user.email,
            "is_chirpy_red": result.user.is_chirpy_red,
            "token": result.access_token,
            "refresh_token": result.refresh_token,
        }
    )
    return jsonify(out), 200


@bp.post("/refresh")
def refresh():
    """
    Use a refresh token to obtain a new access token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK (returns a new access token)
      401:
        description: Unauthorized
    """
    token = get_session_service().renew(request.headers)
    return jsonify({"token": token}), 200


@bp.post("/revoke")
def revoke():
    """
    Revoke a refresh token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      204:
        description: Revoked
      404:
        description: Unknown or already revoked refresh token
    """
    get_session_service().revoke(request.headers)
    return ("", 204)
