"""
Pytest fixtures for the sweet shop backend tests.

Provides test database setup, user/admin actors, sweets and the test client.
"""

import pytest
from sweetshop import create_app
from sweetshop.config import TestingConfig
from sweetshop.extensions import db
from sweetshop.models import User, Role, Sweet
from sweetshop.services.auth_service import hash_password
from sweetshop.services.token_service import get_token_service


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TestingConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def client(app, db_session):
    """Create test client."""
    return app.test_client()


def make_user(db_session, username: str, role: Role = Role.USER, password: str = "password123") -> User:
    user = User(
        username=username,
        password_hash=hash_password(password),
        role=role,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture(scope='function')
def regular_user(db_session):
    """Actor with the default 'user' role."""
    return make_user(db_session, "regular_user")


@pytest.fixture(scope='function')
def admin_user(db_session):
    """Actor with the 'admin' role."""
    return make_user(db_session, "admin_user", role=Role.ADMIN)


@pytest.fixture(scope='function')
def user_headers(app, regular_user):
    return auth_headers(issue_token(app, regular_user))


@pytest.fixture(scope='function')
def admin_headers(app, admin_user):
    return auth_headers(issue_token(app, admin_user))


def make_sweet(db_session, name: str, *, category: str = "Candy", price: float = 10.5,
               quantity: int = 100, **extra) -> Sweet:
    sweet = Sweet(name=name, category=category, price=price, quantity=quantity, **extra)
    db_session.add(sweet)
    db_session.commit()
    return sweet


@pytest.fixture(scope='function')
def sweet(db_session):
    """A stocked sweet without an image."""
    return make_sweet(db_session, "Test Sweet")


def issue_token(app, user: User) -> str:
    with app.app_context():
        return get_token_service().issue(user)


def get_auth_token(client, username: str, password: str) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}
