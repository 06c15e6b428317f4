"""
Passphrase Verifier - bcrypt check of the shared secret phrase.

bcrypt is deliberately slow; callers on the event loop should run
`verify` in a worker thread.
"""

import bcrypt

from pairchat.domain.exceptions import AuthConfigurationError, InvalidCredential

# bcrypt only looks at the first 72 bytes; longer inputs never match
BCRYPT_MAX_BYTES = 72


class PassphraseVerifier:
    def __init__(self, hashed_phrase: str):
        self._hashed = hashed_phrase.encode("utf-8") if hashed_phrase else b""

    def verify(self, phrase: str) -> None:
        """
        Raises:
            InvalidCredential: phrase does not match
            AuthConfigurationError: no hash configured or the hash is malformed
        """
        if not self._hashed:
            raise AuthConfigurationError("CHAT_SECRET_HASH is not set")
        candidate = phrase.encode("utf-8")
        if not candidate or len(candidate) > BCRYPT_MAX_BYTES:
            raise InvalidCredential()
        try:
            matched = bcrypt.checkpw(candidate, self._hashed)
        except ValueError as e:
            raise AuthConfigurationError(f"CHAT_SECRET_HASH is not a bcrypt hash: {e}")
        if not matched:
            raise InvalidCredential()
