# backend/sweetshop/config.py
from __future__ import annotations
import os


class Config:
    # Required: signing key for bearer tokens (create_app refuses to start without it)
    JWT_SECRET = os.environ.get("JWT_SECRET")
    JWT_LIFETIME_DAYS = 7

    # SQLite DB stored in backend/instance/sweetshop.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///sweetshop.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

    # Image uploads: 5MB per file, request body capped slightly above that
    MAX_IMAGE_BYTES = int(os.environ.get("MAX_IMAGE_BYTES", str(5 * 1024 * 1024)))
    MAX_CONTENT_LENGTH = MAX_IMAGE_BYTES + 64 * 1024

    FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:5173")

    APP_ENV = os.environ.get("APP_ENV", "production")
    # Include stack traces in 500 responses (development only)
    DIAGNOSTIC_ERRORS = APP_ENV == "development"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestingConfig(Config):
    TESTING = True
    JWT_SECRET = "test-jwt-secret-key-for-testing-only"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    BCRYPT_ROUNDS = 4
    APP_ENV = "testing"
    DIAGNOSTIC_ERRORS = False
