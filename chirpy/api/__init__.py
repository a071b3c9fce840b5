import logging

from flasgger import Swagger
from flask import Flask
from flask_cors import CORS

from chirpy.models import storage

from .config import AuthSettings, get_config
from .errors import register_error_handlers

logger = logging.getLogger(__name__)

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Chirpy API",
        "version": "1.0.0",
        "description": "Short posts, password login and token sessions.",
    },
    "basePath": "/",
    "schemes": ["http"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Access or refresh token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\".",
        },
        "ApiKey": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Webhook key with the `ApiKey ` prefix.",
        },
    },
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,
            "model_filter": lambda tag: True,
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def create_app(config_name: str | None = None, test_config: dict | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    Raises ConfigError before anything is registered when JWT_SECRET or
    POLKA_KEY is missing; the process must not serve traffic without them.
    """
    from chirpy.utils.decorators import SESSION_EXTENSION
    from chirpy.utils.refresh_tokens import RefreshTokenStore
    from chirpy.utils.session import SessionService

    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))
    if test_config:
        app.config.update(test_config)

    settings = AuthSettings.from_config(app.config)

    storage.reload(app.config["DATABASE_URL"])
    app.extensions[SESSION_EXTENSION] = SessionService(
        settings,
        users=storage,
        refresh_tokens=RefreshTokenStore(storage),
    )

    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    register_error_handlers(app)

    from .admin import bp as admin_bp
    from .auth import bp as auth_bp
    from .chirps import bp as chirps_bp
    from .health import bp as health_bp
    from .users import bp as users_bp
    from .webhooks import bp as webhooks_bp

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(users_bp, url_prefix="/api")
    app.register_blueprint(chirps_bp, url_prefix="/api")
    app.register_blueprint(webhooks_bp, url_prefix="/api")
    app.register_blueprint(admin_bp, url_prefix="/admin")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Chirpy",
            "docs": "/apidocs/",
            "health": "/api/healthz",
        }, 200

    logger.info("app created (env=%s)", app.config.get("APP_ENV"))
    return app
