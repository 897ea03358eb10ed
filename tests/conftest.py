import itertools
import os
import tempfile
from urllib.parse import urlparse

# config.py reads these at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("GRAMMABLE_DATA_DIR", tempfile.mkdtemp(prefix="grammable-test-"))

import pytest
from cachelib.file import FileSystemCache

from app import create_app
from app.services import gram_service, user_service
from config import Config

DEFAULT_PASSWORD = "password123"


class TestConfig(Config):
    TESTING = True
    WTF_CSRF_ENABLED = False
    SESSION_TYPE = "cachelib"
    SESSION_COOKIE_SECURE = False
    REMEMBER_COOKIE_SECURE = False
    LOG_LEVEL = "ERROR"
    DEV_USER_USERNAME = None
    DEV_USER_PASSWORD = None


@pytest.fixture
def app(tmp_path):
    config = type(
        "IsolatedTestConfig",
        (TestConfig,),
        {
            "KUZU_DB_PATH": str(tmp_path / "kuzu" / "grammable.db"),
            "SESSION_CACHELIB": FileSystemCache(cache_dir=str(tmp_path / "sessions")),
        },
    )
    app = create_app(config)
    yield app
    app.extensions["kuzu"].disconnect()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def user_factory(app):
    counter = itertools.count(1)

    def make_user(username=None, email=None, password=DEFAULT_PASSWORD):
        username = username or f"user{next(counter)}"
        with app.app_context():
            return user_service.create_user(
                username=username,
                email=email or f"{username}@example.com",
                password=password,
            )

    return make_user


@pytest.fixture
def gram_factory(app, user_factory):
    def make_gram(user=None, message="Initial Value"):
        user = user or user_factory()
        with app.app_context():
            return gram_service.create_gram(user, message)

    return make_gram


@pytest.fixture
def login(client):
    def do_login(user, password=DEFAULT_PASSWORD):
        response = client.post(
            "/auth/login", data={"username": user.username, "password": password}
        )
        assert response.status_code == 302
        return response

    return do_login


def redirect_path(response):
    """Path part of a redirect's Location header."""
    return urlparse(response.headers["Location"]).path
