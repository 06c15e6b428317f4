"""
Auth errors - raised by the login flow, token verification and session binding.
Maps to: HTTP 401 on login, auth_error + close on the websocket.
"""


class AuthError(Exception):
    """Base class for authentication and authorization failures."""

    reason = "auth_error"

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message)
        self.message = message


class TokenMissing(AuthError):
    reason = "token_missing"

    def __init__(self, message: str = "Authentication token required"):
        super().__init__(message)


class TokenInvalidOrExpired(AuthError):
    reason = "token_invalid"

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class Unauthorized(AuthError):
    reason = "unauthorized"

    def __init__(self, message: str = "Unauthorized identity"):
        super().__init__(message)


class InvalidCredential(AuthError):
    reason = "invalid_credential"

    def __init__(self, message: str = "Invalid secret phrase"):
        super().__init__(message)


class AuthConfigurationError(Exception):
    """Server-side auth setup is unusable (missing secret, malformed hash).
    Maps to: HTTP 500
    """

    def __init__(self, message: str = "Authentication is not configured"):
        super().__init__(message)
        self.message = message
