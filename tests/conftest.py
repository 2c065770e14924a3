"""Shared pytest configuration for MorFit tests."""

from datetime import timedelta

import pytest

from morfit import create_app
from morfit.config import Config
from morfit.security import Identity, TokenService

TEST_SECRET = "morfit-test-secret-0123456789abcdef"


@pytest.fixture
def config():
    return Config(
        jwt_secret=TEST_SECRET,
        env="testing",
        token_ttl=timedelta(hours=24),
        database_url="postgresql://unused/morfit_test",
    )


@pytest.fixture
def app(config):
    return create_app(config)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def tokens():
    return TokenService(TEST_SECRET)


@pytest.fixture
def admin():
    return Identity(
        id="11111111-1111-4111-8111-111111111111",
        email="admin@morfitstudio.com",
        role_id="admin",
        full_name="Admin User",
    )


@pytest.fixture
def staff():
    return Identity(
        id="22222222-2222-4222-9222-222222222222",
        email="trainer@morfitstudio.com",
        role_id="staff",
        full_name="Ayşe Yılmaz",
    )


@pytest.fixture
def auth_header(tokens):
    """Build an Authorization header for an identity."""

    def make(identity):
        return {"Authorization": f"Bearer {tokens.issue(identity)}"}

    return make
