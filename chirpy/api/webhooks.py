from __future__ import annotations

import logging
import uuid

from flask import Blueprint, abort, request

from chirpy.models import storage
from chirpy.models.schemas.webhook import USER_UPGRADED, PolkaWebhookSchema
from chirpy.utils.decorators import api_key_required

logger = logging.getLogger(__name__)

bp = Blueprint("webhooks", __name__)

webhook_schema = PolkaWebhookSchema()


@bp.post("/polka/webhooks")
@api_key_required()
def polka_webhook():
    """
    Payment provider callback; `user.upgraded` sets the Chirpy Red flag.
    ---
    tags:
      - Webhooks
    security:
      - ApiKey: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            event: { type: string }
            data:
              type: object
              properties:
                user_id: { type: string }
    responses:
      204: { description: Acknowledged }
      401: { description: Bad API key }
      404: { description: Unknown user }
    """
    payload = request.get_json(silent=True) or {}
    data = webhook_schema.load(payload)

    # other events are acknowledged and ignored
    if data["event"] != USER_UPGRADED:
        return ("", 204)

    try:
        user_id = str(uuid.UUID(data["data"].get("user_id") or ""))
    except ValueError:
        abort(400, description="not a valid user id")

    if storage.upgrade_user(user_id) is None:
        abort(404)

    logger.info("user %s upgraded to Chirpy Red", user_id)
    return ("", 204)
