# Overview: Signed bearer tokens binding actor identity and role.

"""
Token Service

Tokens are HS256 JWTs carrying {sub, role, username, iat, exp}. They are not
stored anywhere; verification needs only the signing secret. The
authentication gate still re-loads the actor on every request so a deleted
account stops working immediately.

The service is built once by create_app() from configuration and stored in
app.extensions["token_service"]. Missing JWT_SECRET is a startup error.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app

ALGORITHM = "HS256"
DEFAULT_LIFETIME = timedelta(days=7)
REQUIRED_CLAIMS = ("sub", "role", "username", "exp")


class InvalidTokenError(Exception):
    """Malformed, unsigned or tampered token."""


class ExpiredTokenError(InvalidTokenError):
    """Signature is valid but the token is past its expiry."""


class TokenService:
    def __init__(self, secret: str | None, lifetime: timedelta = DEFAULT_LIFETIME):
        if not secret:
            raise RuntimeError("JWT_SECRET is not defined")
        self._secret = secret
        self.lifetime = lifetime

    def issue(self, user) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user.id,
            "role": user.role.value,
            "username": user.username,
            "iat": now,
            "exp": now + self.lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> dict:
        """
        Decode and validate a token.

        Raises ExpiredTokenError past expiry, InvalidTokenError for anything
        else that fails signature or claim checks.
        """
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": list(REQUIRED_CLAIMS)},
            )
        except jwt.ExpiredSignatureError as exc:
            raise ExpiredTokenError("Token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError("Invalid token") from exc


def get_token_service() -> TokenService:
    return current_app.extensions["token_service"]
