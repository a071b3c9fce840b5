from __future__ import annotations

import logging

from flask import Blueprint, abort, g, jsonify, request

from chirpy.models import storage
from chirpy.models.schemas.user import UserCreateSchema, UserOutSchema, UserUpdateSchema
from chirpy.models.user import User
from chirpy.utils.decorators import jwt_required
from chirpy.utils.security import hash_password

logger = logging.getLogger(__name__)

bp = Blueprint("users", __name__)

user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()
user_out_schema = UserOutSchema()


@bp.post("/users")
def create_user():
    """
    Register a new user.
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            email: { type: string }
            password: { type: string }
    responses:
      201:
        description: Created
      409:
        description: Email already registered
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = user_create_schema.load(payload)

    if storage.get_user_by_email(data["email"]):
        abort(409, description="Email already registered")

    user = User(email=data["email"], password_hash=hash_password(data["password"]))
    storage.new(user)
    storage.save()

    logger.info("user %s created", user.id)
    return jsonify(user_out_schema.dump(user)), 201


@bp.put("/users")
@jwt_required()
def update_credentials():
    """
    Replace the caller's email and password.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            email: { type: string }
            password: { type: string }
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    payload = request.get_json(silent=True) or {}
    data = user_update_schema.load(payload)

    user = storage.get_user_by_id(g.current_user_id)
    if user is None:
        # token outlived its user (admin reset)
        abort(404)

    other = storage.get_user_by_email(data["email"])
    if other is not None and other.id != user.id:
        abort(409, description="Email already registered")

    user.email = data["email"]
    user.password_hash = hash_password(data["password"])
    storage.save()

    logger.info("user %s updated credentials", user.id)
    return jsonify(user_out_schema.dump(user)), 200
