"""
APPLICATION LAYER - Use Cases & Orchestration

This layer contains:
- commands/  → login, join/leave, chat message, reaction toggle, typing
- queries/   → history reconstruction
- services/  → session registry, presence, per-message locks
- dto/       → wire shapes for HTTP and websocket payloads
- common/    → Command/Query base classes

Rules:
- Depends on Domain layer and ports only
- No HTTP/framework code here
"""
