import os
import time

import bcrypt
import jwt
import pytest

SECRET_PHRASE = "open sesame"
JWT_SECRET = os.environ.setdefault("JWT_SECRET", "test-secret-that-is-long-enough-for-hs256")
os.environ["CHAT_IDENTITIES"] = "A,B"
os.environ["CHAT_SECRET_HASH"] = bcrypt.hashpw(
    SECRET_PHRASE.encode("utf-8"), bcrypt.gensalt(rounds=4)
).decode("utf-8")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

# Settings are read at import time, so the environment above must come first
from fastapi.testclient import TestClient
from pairchat.config.settings import Config
from pairchat.fastapi_app import create_fastapi_app
from pairchat.setup.ioc.container import create_container

AUD = Config.JWT_AUDIENCE
ISS = Config.JWT_ISSUER


def _chat_token(sub=None, exp_offset=300, secret=None):
    now = int(time.time())
    return jwt.encode(
        {
            "sub": sub or Config.TOKEN_SUBJECT,
            "iat": now,
            "exp": now + exp_offset,
            "iss": ISS,
            "aud": AUD,
        },
        secret or JWT_SECRET,
        algorithm="HS256",
    )


@pytest.fixture()
def test_config(tmp_path):
    """Config with its own SQLite file per test."""
    return type(
        "TestConfig",
        (Config,),
        {"DATABASE_URL": f"sqlite+aiosqlite:///{tmp_path / 'chat.db'}"},
    )


@pytest.fixture()
def app(test_config):
    """Create and configure a new FastAPI app instance for each test."""
    return create_fastapi_app(create_container(test_config))


@pytest.fixture()
def client(app):
    """A test client with the lifespan running (schema created)."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def chat_token():
    return _chat_token()
