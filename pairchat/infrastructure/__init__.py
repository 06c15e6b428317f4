"""
Infrastructure Layer - Technical implementations of domain ports.

This layer contains:
- auth/: PyJWT token service, bcrypt passphrase verifier
- persistence/: SQLAlchemy (async) message repository
- realtime/: FastAPI WebSocket event bus
"""
