# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

# backend/sweetshop/routes/auth.py
"""
Authentication API routes

- POST /auth/register: self-registration (role "user" unless "admin" requested)
- POST /auth/login: exchange username/password for a bearer token
- GET  /auth/me: echo the actor behind the presented token
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..services import auth_service
from ..services.auth_service import AuthenticationError
from ..services.token_service import get_token_service
from ..validation import ValidationError, ConflictError
from ..decorators import require_auth


auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


def _fail(message: str, status: int):
    current_app.logger.warning("%s %s failed (%s): %s", request.method, request.path, status, message)
    return jsonify({"message": message}), status


@auth_bp.post("/register")
def register_route():
    """
    Register a new actor and return a token.

    Request body: {"username": str, "password": str, "role": "user"|"admin"?}
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return _fail("Invalid JSON payload", 400)

    try:
        user = auth_service.create_user(
            username=data.get("username"),
            password=data.get("password"),
            role=data.get("role"),
        )
    except ValidationError as e:
        return _fail(str(e), 400)
    except ConflictError as e:
        return _fail(str(e), 409)

    token = get_token_service().issue(user)
    return jsonify({"token": token, "user": user.to_dict()}), 201


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and issue a token.

    SECURITY: unknown username and wrong password produce the same 401.
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return _fail("Invalid JSON payload", 400)

    try:
        user = auth_service.authenticate(data.get("username"), data.get("password"))
    except ValidationError as e:
        return _fail(str(e), 400)
    except AuthenticationError as e:
        return _fail(str(e), 401)

    token = get_token_service().issue(user)
    return jsonify({"token": token, "user": user.to_dict()}), 200


@auth_bp.get("/me")
@require_auth
def me_route():
    """Return the authenticated actor (lets clients check a stored token)."""
    return jsonify({"user": g.current_user.to_dict()}), 200
