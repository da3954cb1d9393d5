# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication Service

Users self-register with a username and password, optionally as "admin".
Passwords are hashed with bcrypt; verification is re-hash-and-compare only.

SECURITY NOTES:
- Login failures use one message for "no such user" and "wrong password"
  so the endpoint cannot be used to enumerate usernames
- Bcrypt rounds come from BCRYPT_ROUNDS (12 in production)
- bcrypt only looks at the first 72 bytes; longer passwords are rejected
  rather than silently truncated
"""

from __future__ import annotations

import bcrypt
from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import User, Role
from ..validation import ValidationError, ConflictError

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_BYTES = 72

INVALID_CREDENTIALS = "Invalid credentials"


class AuthenticationError(Exception):
    """401-level: credentials or token did not identify an actor."""


def normalize_username(username) -> str:
    if not isinstance(username, str):
        raise ValidationError("Username must be a string")
    return username.strip()


def parse_role(role) -> Role:
    """Missing role defaults to USER; anything outside the enum is rejected."""
    if role is None or role == "":
        return Role.USER
    try:
        return Role(role)
    except ValueError:
        raise ValidationError("Invalid role. Must be 'user' or 'admin'")


def validate_password(password) -> None:
    if not isinstance(password, str):
        raise ValidationError("Password must be a string")
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValidationError(f"Password cannot exceed {PASSWORD_MAX_BYTES} bytes")


def hash_password(password: str, rounds: int | None = None) -> str:
    """
    Hash password using bcrypt.

    Password is validated before hashing.
    """
    validate_password(password)
    if rounds is None:
        rounds = current_app.config.get("BCRYPT_ROUNDS", 12)
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    bcrypt.checkpw() compares in constant time.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Malformed stored hash or over-long candidate
        return False


def _username_taken(username: str) -> bool:
    return db.session.query(User.id).filter(User.username == username).first() is not None


def create_user(username, password, role=None) -> User:
    """
    Create new user with bcrypt password hashing.

    Raises:
        ValidationError: missing/short username or password, unknown role
        ConflictError: username already taken (pre-check or unique index race)
    """
    if not username or not password:
        raise ValidationError("Username and password are required")

    username = normalize_username(username)
    if len(username) < USERNAME_MIN_LENGTH:
        raise ValidationError(f"Username must be at least {USERNAME_MIN_LENGTH} characters")
    if len(username) > USERNAME_MAX_LENGTH:
        raise ValidationError(f"Username cannot exceed {USERNAME_MAX_LENGTH} characters")

    validate_password(password)
    role = parse_role(role)

    if _username_taken(username):
        raise ConflictError("Username already taken")

    user = User(
        username=username,
        password_hash=hash_password(password),
        role=role,
    )

    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same username
        db.session.rollback()
        raise ConflictError("Username already taken")

    current_app.logger.info("Registered user %s (role=%s)", user.username, user.role.value)
    return user


def authenticate(username, password) -> User:
    """
    Authenticate user with username and password.

    Raises ValidationError when a field is missing, AuthenticationError
    (always "Invalid credentials") when the pair does not match.
    """
    if not username or not password:
        raise ValidationError("Username and password are required")

    if not isinstance(username, str) or not isinstance(password, str):
        raise AuthenticationError(INVALID_CREDENTIALS)

    user = db.session.query(User).filter(User.username == username.strip()).first()

    if not user or not verify_password(password, user.password_hash):
        raise AuthenticationError(INVALID_CREDENTIALS)

    return user


def get_user(user_id) -> User | None:
    if not isinstance(user_id, str):
        return None
    return db.session.get(User, user_id)
