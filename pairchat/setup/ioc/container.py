"""
Dishka DI Container Setup.

- Scope.APP: one instance for the process (engine, auth services, session
  registry, event bus, presence, reaction locks)
- Scope.REQUEST: one instance per HTTP request or per inbound websocket
  frame (database session, repository, handlers)

Flow:
  Container → provides → SqlAlchemyMessageRepository → to → SendMessageHandler
                                    ↓
                            uses MessageRepository interface
"""

from typing import AsyncIterable

from dishka import AsyncContainer, Provider, Scope, make_async_container, provide
from dishka.integrations.fastapi import FastapiProvider
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from pairchat.application.commands.auth import LoginHandler
from pairchat.application.commands.chat import (
    SendMessageHandler,
    ToggleReactionHandler,
    TypingHandler,
)
from pairchat.application.commands.session import JoinHandler, LeaveHandler
from pairchat.application.queries.chat import GetChatHistoryHandler
from pairchat.application.services import KeyedLock, PresenceBroadcaster, SessionRegistry
from pairchat.config.settings import Config
from pairchat.domain.ports.event_bus import EventBus
from pairchat.domain.ports.repositories import MessageRepository
from pairchat.domain.value_objects.identity import IdentityWhitelist
from pairchat.infrastructure.auth import PassphraseVerifier, TokenService
from pairchat.infrastructure.persistence import SqlAlchemyMessageRepository, create_engine
from pairchat.infrastructure.persistence.database import create_session_factory
from pairchat.infrastructure.realtime import WebSocketEventBus


class AppProvider(Provider):
    """
    Application dependency provider.

    `config` defaults to the environment-backed Config; tests pass a subclass
    with overridden attributes.
    """

    def __init__(self, config: type[Config] = Config):
        super().__init__()
        self._config = config

    # ==================== AUTH ====================

    @provide(scope=Scope.APP)
    def get_whitelist(self) -> IdentityWhitelist:
        return IdentityWhitelist.from_names(self._config.CHAT_IDENTITIES)

    @provide(scope=Scope.APP)
    def get_token_service(self) -> TokenService:
        return TokenService(
            secret=self._config.JWT_SECRET,
            issuer=self._config.JWT_ISSUER,
            audience=self._config.JWT_AUDIENCE,
            subject=self._config.TOKEN_SUBJECT,
            ttl_seconds=self._config.TOKEN_TTL_SECONDS,
        )

    @provide(scope=Scope.APP)
    def get_passphrase_verifier(self) -> PassphraseVerifier:
        return PassphraseVerifier(self._config.CHAT_SECRET_HASH)

    # ==================== DATABASE ====================

    @provide(scope=Scope.APP)
    async def get_engine(self) -> AsyncIterable[AsyncEngine]:
        """Engine is disposed when the container closes (app shutdown)."""
        engine = create_engine(self._config.DATABASE_URL, echo=self._config.DB_ECHO)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(self, engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterable[AsyncSession]:
        async with session_factory() as session:
            yield session

    # ==================== REALTIME ====================

    @provide(scope=Scope.APP)
    def get_event_bus(self) -> EventBus:
        return WebSocketEventBus()

    @provide(scope=Scope.APP)
    def get_session_registry(self, whitelist: IdentityWhitelist) -> SessionRegistry:
        return SessionRegistry(whitelist)

    @provide(scope=Scope.APP)
    def get_presence(
        self, registry: SessionRegistry, event_bus: EventBus
    ) -> PresenceBroadcaster:
        return PresenceBroadcaster(registry, event_bus)

    @provide(scope=Scope.APP)
    def get_reaction_locks(self) -> KeyedLock:
        return KeyedLock()

    # ==================== REPOSITORIES ====================

    @provide(scope=Scope.REQUEST)
    def get_message_repository(self, session: AsyncSession) -> MessageRepository:
        """Return type is the port; dishka hands this to anything asking for MessageRepository."""
        return SqlAlchemyMessageRepository(
            session, timeout_seconds=self._config.DB_STATEMENT_TIMEOUT_SECONDS
        )

    # ==================== HANDLERS ====================

    @provide(scope=Scope.REQUEST)
    def get_login_handler(
        self, verifier: PassphraseVerifier, token_service: TokenService
    ) -> LoginHandler:
        return LoginHandler(verifier, token_service)

    @provide(scope=Scope.REQUEST)
    def get_chat_history_handler(self, msg_repo: MessageRepository) -> GetChatHistoryHandler:
        return GetChatHistoryHandler(msg_repo)

    @provide(scope=Scope.REQUEST)
    def get_join_handler(
        self,
        registry: SessionRegistry,
        token_service: TokenService,
        presence: PresenceBroadcaster,
        event_bus: EventBus,
        history_handler: GetChatHistoryHandler,
    ) -> JoinHandler:
        return JoinHandler(
            registry=registry,
            token_service=token_service,
            presence=presence,
            event_bus=event_bus,
            history_handler=history_handler,
            require_token=self._config.REQUIRE_JOIN_TOKEN,
        )

    @provide(scope=Scope.REQUEST)
    def get_leave_handler(
        self,
        registry: SessionRegistry,
        presence: PresenceBroadcaster,
        event_bus: EventBus,
    ) -> LeaveHandler:
        return LeaveHandler(registry, presence, event_bus)

    @provide(scope=Scope.REQUEST)
    def get_send_message_handler(
        self,
        registry: SessionRegistry,
        msg_repo: MessageRepository,
        event_bus: EventBus,
    ) -> SendMessageHandler:
        return SendMessageHandler(
            registry, msg_repo, event_bus, max_length=self._config.MAX_MESSAGE_LENGTH
        )

    @provide(scope=Scope.REQUEST)
    def get_toggle_reaction_handler(
        self,
        registry: SessionRegistry,
        msg_repo: MessageRepository,
        event_bus: EventBus,
        locks: KeyedLock,
    ) -> ToggleReactionHandler:
        return ToggleReactionHandler(
            registry,
            msg_repo,
            event_bus,
            locks,
            max_emoji_length=self._config.MAX_EMOJI_LENGTH,
        )

    @provide(scope=Scope.REQUEST)
    def get_typing_handler(
        self, registry: SessionRegistry, event_bus: EventBus
    ) -> TypingHandler:
        return TypingHandler(registry, event_bus)


def create_container(config: type[Config] = Config) -> AsyncContainer:
    # FastapiProvider declares the Request/WebSocket context dishka's middleware passes in
    return make_async_container(AppProvider(config), FastapiProvider())
