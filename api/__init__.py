from flask import Flask
from flasgger import Swagger
from flask_cors import CORS
import logging

import click

from .config import get_config
from .errors import register_error_handlers
from models import DBStorage
from services.auth_flow import AuthFlow
from services.token_store import TokenStore
from services.user_admin import UserAdmin
from utils.security import TokenSigner

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "User Auth API",
        "version": "1.0.0",
        "description": "Registration, login, refresh-token rotation, profile and user administration.",
    },
    "basePath": "/",  # blueprints are mounted under /api/v1
    "schemes": ["http"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def init_services(app: Flask) -> None:
    """Build storage and services from app.config and attach them to app.extensions."""
    cfg = app.config
    storage = DBStorage(cfg["DATABASE_URL"], echo=cfg.get("SQL_ECHO", False))
    storage.reload()

    signer = TokenSigner(
        secret=cfg.get("JWT_SECRET"),
        algorithm=cfg.get("JWT_ALGORITHM", "HS256"),
        access_ttl=cfg["ACCESS_TOKEN_EXPIRES"],
        issuer=cfg.get("JWT_ISSUER", "user-auth-api"),
    )
    token_store = TokenStore(storage, refresh_ttl=cfg["REFRESH_TOKEN_EXPIRES"])

    app.extensions["storage"] = storage
    app.extensions["token_signer"] = signer
    app.extensions["token_store"] = token_store
    app.extensions["auth_flow"] = AuthFlow(
        storage,
        signer,
        token_store,
        revoke_sessions_on_password_change=cfg.get("REVOKE_SESSIONS_ON_PASSWORD_CHANGE", True),
    )
    app.extensions["user_admin"] = UserAdmin(storage, token_store)


def register_commands(app: Flask) -> None:
    @app.cli.command("init-db")
    def init_db():
        """Create database tables."""
        app.extensions["storage"].reload()
        click.echo("Database initialized")

    @app.cli.command("purge-tokens")
    def purge_tokens():
        """Delete expired refresh tokens."""
        removed = app.extensions["token_store"].purge_expired()
        click.echo(f"Removed {removed} expired refresh token(s)")


def create_app(config_name: str | None = None, **overrides) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    overrides are applied on top of the selected config class (used by tests).
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))
    app.config.update(overrides)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Cross-Origin Resource Sharing: enable for dev, configurable for prod
    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Global error handlers that return the uniform response envelope
    register_error_handlers(app)

    init_services(app)
    register_commands(app)

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .users import bp as users_bp

    app.register_blueprint(health_bp, url_prefix="/api/v1")
    app.register_blueprint(auth_bp, url_prefix="/api/v1/auth")
    app.register_blueprint(users_bp, url_prefix="/api/v1")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        # This calls scoped_session.remove(), preventing connection leaks
        app.extensions["storage"].close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to User Auth API",
            "docs": "/apidocs/",
            "health": "/api/v1/health",
        }, 200

    return app
