import logging

from flask import Blueprint, abort, current_app

from chirpy.models import storage

logger = logging.getLogger(__name__)

bp = Blueprint("admin", __name__)


@bp.post("/reset")
def reset():
    """
    Delete all users, chirps and refresh tokens (PLATFORM=dev only).
    ---
    tags:
      - Admin
    responses:
      200: { description: Database cleared }
      403: { description: Not a dev deployment }
    """
    if current_app.config.get("PLATFORM") != "dev":
        abort(403)

    storage.reset()
    logger.warning("all database records were cleared")
    return {"status": "reset"}, 200
