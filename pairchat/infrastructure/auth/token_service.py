"""
Token Service - issues and verifies the session JWT handed out by /api/auth/login.

Tokens are HS256, carry a fixed subject (the chat is one shared account),
and expire after TOKEN_TTL_SECONDS (24h by default).
"""

import logging
import time
from typing import Any, Optional

import jwt

from pairchat.domain.exceptions import (
    AuthConfigurationError,
    TokenInvalidOrExpired,
    TokenMissing,
)

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class TokenService:
    def __init__(
        self,
        secret: str,
        issuer: str,
        audience: str,
        subject: str,
        ttl_seconds: int = 24 * 60 * 60,
    ):
        self._secret = secret
        self._issuer = issuer
        self._audience = audience
        self._subject = subject
        self._ttl_seconds = ttl_seconds

    def _require_secret(self) -> str:
        if not self._secret:
            raise AuthConfigurationError("JWT_SECRET is not set")
        return self._secret

    def issue(self, now: Optional[int] = None) -> str:
        issued_at = int(time.time()) if now is None else now
        return jwt.encode(
            {
                "sub": self._subject,
                "iat": issued_at,
                "exp": issued_at + self._ttl_seconds,
                "iss": self._issuer,
                "aud": self._audience,
            },
            self._require_secret(),
            algorithm=ALGORITHM,
        )

    def verify(self, token: Optional[str]) -> dict[str, Any]:
        """
        Decode and validate a token.

        Raises:
            TokenMissing: no token presented
            TokenInvalidOrExpired: bad signature, expired, or wrong iss/aud/sub
        """
        if not token or not isinstance(token, str):
            raise TokenMissing()
        try:
            claims = jwt.decode(
                token,
                self._require_secret(),
                algorithms=[ALGORITHM],
                audience=self._audience,
                issuer=self._issuer,
                options={"require": ["exp", "iat", "aud", "iss", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenInvalidOrExpired("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.debug("Rejected token: %s", e)
            raise TokenInvalidOrExpired()
        if claims.get("sub") != self._subject:
            raise TokenInvalidOrExpired()
        return claims
