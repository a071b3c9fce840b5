from __future__ import annotations

import logging
import uuid

from flask import Blueprint, abort, g, jsonify, request

from chirpy.models import storage
from chirpy.models.chirp import Chirp
from chirpy.models.schemas.chirp import ChirpCreateSchema, ChirpListArgsSchema, ChirpOutSchema
from chirpy.utils.decorators import get_session_service, jwt_required

logger = logging.getLogger(__name__)

bp = Blueprint("chirps", __name__)

chirp_create_schema = ChirpCreateSchema()
chirp_out_schema = ChirpOutSchema()
chirp_list_out_schema = ChirpOutSchema(many=True)
chirp_list_args_schema = ChirpListArgsSchema()

BAD_WORDS = frozenset({"kerfuffle", "sharbert", "fornax"})
CENSORED = "****"


def censor(message: str, bad_words=BAD_WORDS) -> str:
    """Replace whole words (case-insensitive) from bad_words; whitespace runs collapse to one space."""
    return " ".join(CENSORED if word.lower() in bad_words else word for word in message.split())


def _parse_chirp_id(chirp_id: str) -> str:
    try:
        return str(uuid.UUID(chirp_id))
    except ValueError:
        abort(400, description="not a valid chirp id")


def _get_chirp_or_404(chirp_id: str) -> Chirp:
    chirp = storage.get(Chirp, _parse_chirp_id(chirp_id))
    if chirp is None:
        abort(404)
    return chirp


@bp.post("/chirps")
@jwt_required()
def create_chirp():
    """
    Post a chirp as the authenticated user.
    ---
    tags:
      - Chirps
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
            body: { type: string }
    responses:
      201:
        description: Created
      401:
        description: Unauthorized
      422:
        description: Validation error
    """
    payload = request.get_json(silent=True) or {}
    data = chirp_create_schema.load(payload)

    chirp = Chirp(body=censor(data["body"]), user_id=g.current_user_id)
    storage.new(chirp)
    storage.save()

    logger.info("chirp %s stored for user %s", chirp.id, chirp.user_id)
    return jsonify(chirp_out_schema.dump(chirp)), 201


@bp.get("/chirps")
def list_chirps():
    """
    List chirps, oldest first unless sort=desc.
    ---
    tags:
      - Chirps
    parameters:
      - in: query
        name: author_id
        type: string
      - in: query
        name: sort
        type: string
        enum: [asc, desc]
    responses:
      200: { description: OK }
    """
    args = chirp_list_args_schema.load(request.args)

    query = storage.get_session().query(Chirp)
    if args["author_id"] is not None:
        query = query.filter(Chirp.user_id == str(args["author_id"]))
    order = Chirp.created_at.desc() if args["sort"] == "desc" else Chirp.created_at.asc()
    rows = query.order_by(order).all()
    return jsonify(chirp_list_out_schema.dump(rows)), 200


@bp.get("/chirps/<chirp_id>")
def get_chirp(chirp_id: str):
    """
    Get one chirp.
    ---
    tags:
      - Chirps
    parameters:
      - in: path
        name: chirp_id
        type: string
        required: true
    responses:
      200: { description: OK }
      400: { description: Not a UUID }
      404: { description: Not found }
    """
    return jsonify(chirp_out_schema.dump(_get_chirp_or_404(chirp_id))), 200


@bp.delete("/chirps/<chirp_id>")
@jwt_required()
def delete_chirp(chirp_id: str):
    """
    Delete one of the caller's chirps.
    ---
    tags:
      - Chirps
    security:
      - Bearer: []
    parameters:
      - in: path
        name: chirp_id
        type: string
        required: true
    responses:
      204: { description: Deleted }
      401: { description: Unauthorized }
      403: { description: Not the author }
      404: { description: Not found }
    """
    chirp = _get_chirp_or_404(chirp_id)
    get_session_service().authorize_owner(g.current_user_id, chirp.user_id)

    storage.delete(chirp)
    storage.save()

    logger.info("chirp %s deleted", chirp.id)
    return ("", 204)
