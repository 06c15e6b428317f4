"""
PersistenceError - The message store failed or timed out.
"""


class PersistenceError(Exception):
    def __init__(self, message: str = "Message store unavailable"):
        super().__init__(message)
        self.message = message
