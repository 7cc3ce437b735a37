"""Shared test fixtures for MasterXP tests.

- app / client: a fresh app bound to a temporary SQLite file
- make_token / auth_headers: HS256 bearer tokens for any subject
- app_ctx: an application context for calling service code directly
"""

import time

import jwt
import pytest

from main_app import create_app


# ─────────────────────────────────────────────────────────────────────────────
# Constants
# ─────────────────────────────────────────────────────────────────────────────

TEST_SECRET = "test-secret-not-for-prod-0123456789"
TEST_DOMAIN = "masterxp-test.auth.local"
TEST_AUDIENCE = "https://masterxp-api"
TEST_SUBJECT = "auth0|alice"
OTHER_SUBJECT = "auth0|bob"
TODAY = "2026-10-19"


# ─────────────────────────────────────────────────────────────────────────────
# App Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def app(tmp_path):
    """App wired to a temporary database and the HS256 test secret."""
    db_file = tmp_path / "masterxp-test.db"
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_file.as_posix()}",
        "AUTH_SECRET": TEST_SECRET,
        "AUTH0_DOMAIN": TEST_DOMAIN,
        "AUTH0_AUDIENCE": TEST_AUDIENCE,
        "LOG_LEVEL": "DEBUG",
    })
    yield app

    from masterxp import db

    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app


# ─────────────────────────────────────────────────────────────────────────────
# Auth Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def make_token():
    """Return a factory minting signed tokens; claims can be overridden or dropped (None)."""

    def _make(subject=TEST_SUBJECT, secret=TEST_SECRET, **overrides):
        now = int(time.time())
        claims = {
            "sub": subject,
            "iss": f"https://{TEST_DOMAIN}/",
            "aud": TEST_AUDIENCE,
            "iat": now,
            "exp": now + 3600,
        }
        claims.update(overrides)
        claims = {k: v for k, v in claims.items() if v is not None}
        return jwt.encode(claims, secret, algorithm="HS256")

    return _make


@pytest.fixture
def auth_headers(make_token):
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def other_headers(make_token):
    return {"Authorization": f"Bearer {make_token(OTHER_SUBJECT)}"}
