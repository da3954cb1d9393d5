# Overview: Request authentication and role decorators for API routes.

from functools import wraps
from flask import request, jsonify, g, current_app

from .models import Role
from .services import auth_service
from .services.token_service import get_token_service, InvalidTokenError, ExpiredTokenError


def _is_authenticated() -> bool:
    return getattr(g, 'current_user', None) is not None


def _deny(message: str, status: int):
    current_app.logger.warning(
        "Access denied (%s) for %s %s from %s: %s",
        status, request.method, request.path, request.remote_addr, message,
    )
    return jsonify({"message": message}), status


def require_auth(f):
    """
    Require a valid bearer token and load the actor.

    Sets g.current_user to the User row (re-read on every request, so a
    deleted account is rejected even while its token is unexpired).

    SECURITY: Returns 401 if:
    - No Authorization header, or "Bearer " with nothing after it
    - Scheme other than Bearer
    - Token malformed, tampered with or expired
    - Actor no longer exists
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        # Extract token from Authorization header
        auth_header = request.headers.get("Authorization")

        if not auth_header:
            return _deny("No token provided", 401)

        if not auth_header.startswith("Bearer "):
            return _deny("Invalid token format", 401)

        token = auth_header.split(" ", 1)[1].strip()
        if not token:
            return _deny("No token provided", 401)

        try:
            claims = get_token_service().verify(token)
        except ExpiredTokenError:
            return _deny("Token expired", 401)
        except InvalidTokenError:
            return _deny("Invalid token", 401)

        user = auth_service.get_user(claims.get("sub"))
        if user is None:
            return _deny("User not found", 401)

        g.current_user = user
        g.token_claims = claims

        return f(*args, **kwargs)

    return decorated_function


def require_admin(f):
    """Require the authenticated actor to hold the admin role."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        # Ensure @require_auth was called first
        if not _is_authenticated():
            return _deny("Authentication required", 401)
        if g.current_user.role is not Role.ADMIN:
            return _deny("Admin access required", 403)
        return f(*args, **kwargs)
    return decorated_function
