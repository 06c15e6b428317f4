from pairchat.infrastructure.auth.token_service import TokenService
from pairchat.infrastructure.auth.passphrase import PassphraseVerifier

__all__ = [
    "TokenService",
    "PassphraseVerifier",
]
