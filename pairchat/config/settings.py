"""Application configuration settings"""

import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


class Config:
    # Identities allowed to bind a session, in presence order
    CHAT_IDENTITIES = os.getenv("CHAT_IDENTITIES", "alice,bob").split(",")

    # Auth
    # bcrypt hash of the shared secret phrase, e.g. bcrypt.hashpw(b"...", bcrypt.gensalt())
    CHAT_SECRET_HASH = os.getenv("CHAT_SECRET_HASH", "")
    JWT_SECRET = os.getenv("JWT_SECRET", "")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "pairchat")
    JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "pairchat-clients")
    TOKEN_SUBJECT = os.getenv("TOKEN_SUBJECT", "chat-user")
    TOKEN_TTL_SECONDS = int(os.getenv("TOKEN_TTL_SECONDS", str(24 * 60 * 60)))
    # Set to false to accept `join {identity}` without a token
    REQUIRE_JOIN_TOKEN = _flag("REQUIRE_JOIN_TOKEN", "true")

    # Database
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./pairchat.db")
    DB_ECHO = _flag("DB_ECHO", "false")
    DB_STATEMENT_TIMEOUT_SECONDS = float(os.getenv("DB_STATEMENT_TIMEOUT_SECONDS", "10"))

    # Chat settings
    MAX_MESSAGE_LENGTH = int(os.getenv("MAX_MESSAGE_LENGTH", "4000"))
    MAX_EMOJI_LENGTH = int(os.getenv("MAX_EMOJI_LENGTH", "32"))

    # HTTP server
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "3000"))
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_PATH = os.getenv("LOG_PATH", "")
    LOG_FORMAT = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s",
    )
