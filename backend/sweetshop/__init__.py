# backend/sweetshop/__init__.py
import traceback
from datetime import timedelta

from flask import Flask, request, jsonify
from werkzeug.exceptions import HTTPException, NotFound, MethodNotAllowed, RequestEntityTooLarge

from .config import Config
from .extensions import db, migrate
from .services.image_codec import format_size
from .services.token_service import TokenService


def create_app(config_object=Config, overrides: dict | None = None) -> Flask:
    """
    Application factory.

    Raises RuntimeError when JWT_SECRET is missing: the service cannot issue or
    verify a single token without it, so it must not start.
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object)
    if overrides:
        app.config.update(overrides)

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Token signing is configured once and shared read-only across requests
    app.extensions["token_service"] = TokenService(
        app.config.get("JWT_SECRET"),
        lifetime=timedelta(days=app.config.get("JWT_LIFETIME_DAYS", 7)),
    )

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.inventory import inventory_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(inventory_bp)

    register_error_handlers(app)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        allowed_origins = {app.config.get("FRONTEND_URL")}
        if origin and origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app


def register_error_handlers(app: Flask) -> None:
    """JSON bodies for framework-level errors and anything routes did not catch."""

    @app.errorhandler(NotFound)
    def route_not_found(e):
        return jsonify({"message": "Route not found"}), 404

    @app.errorhandler(MethodNotAllowed)
    def method_not_allowed(e):
        return jsonify({"message": "Method not allowed"}), 405

    @app.errorhandler(RequestEntityTooLarge)
    def upload_too_large(e):
        app.logger.warning("Rejected oversized request to %s", request.path)
        limit = format_size(app.config["MAX_IMAGE_BYTES"])
        return jsonify({"message": f"File too large. Maximum size is {limit}"}), 400

    @app.errorhandler(HTTPException)
    def http_error(e):
        return jsonify({"message": e.description}), e.code

    @app.errorhandler(Exception)
    def unhandled_error(e):
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        db.session.rollback()
        body = {"message": "Server error"}
        if app.config.get("DIAGNOSTIC_ERRORS"):
            body["message"] = str(e) or body["message"]
            body["stack"] = traceback.format_exc()
        return jsonify(body), 500
