"""
Login Command - trade the shared secret phrase for a session token.

- Handler checks the phrase with bcrypt (in a worker thread, it is slow on purpose)
- Returns a signed JWT on success
- Raises InvalidCredential on mismatch, AuthConfigurationError when the
  server has no usable hash or signing secret
"""

import asyncio
import logging
from dataclasses import dataclass

from pairchat.application.common.interfaces import Command, CommandHandler
from pairchat.domain.exceptions import AuthConfigurationError, InvalidCredential
from pairchat.infrastructure.auth import PassphraseVerifier, TokenService
from pairchat.observability.metrics import increment_login_attempt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginCommand(Command[str]):
    secret_phrase: str


class LoginHandler(CommandHandler[str]):
    def __init__(self, verifier: PassphraseVerifier, token_service: TokenService):
        self._verifier = verifier
        self._token_service = token_service

    async def execute(self, command: LoginCommand) -> str:
        try:
            await asyncio.to_thread(self._verifier.verify, command.secret_phrase)
            token = self._token_service.issue()
        except InvalidCredential:
            increment_login_attempt("invalid_credential")
            logger.info("Login rejected: invalid secret phrase")
            raise
        except AuthConfigurationError as e:
            increment_login_attempt("error")
            logger.error("Login unavailable: %s", e.message)
            raise
        increment_login_attempt("success")
        logger.info("Login succeeded, token issued")
        return token
