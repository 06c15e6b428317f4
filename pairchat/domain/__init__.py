"""
DOMAIN LAYER - Chat rules without I/O

This layer contains:
- Entities: Message, Session
- Value Objects: MessageId, Reaction, ReplySnapshot, IdentityWhitelist
- Ports: MessageRepository, EventBus
- Services: Pure reaction toggling
- Exceptions: Auth, validation, persistence and lookup errors

RULES:
1. NO framework imports (no FastAPI, SQLAlchemy, Pydantic, etc.)
2. NO I/O operations
3. Only depends on Python stdlib
"""
