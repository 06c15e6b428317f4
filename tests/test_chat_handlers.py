import asyncio

import pytest
import pytest_asyncio

from pairchat.application.commands.chat import (
    Persisted,
    SendMessageCommand,
    SendMessageHandler,
    ToggleReactionCommand,
    ToggleReactionHandler,
    TypingCommand,
    TypingHandler,
    Unpersisted,
)
from pairchat.application.commands.session import JoinCommand, JoinHandler
from pairchat.application.queries.chat import GetChatHistoryHandler, GetChatHistoryQuery
from pairchat.application.services import KeyedLock, PresenceBroadcaster, SessionRegistry
from pairchat.config.settings import Config
from pairchat.domain.entities.message import Message
from pairchat.domain.value_objects import IdentityWhitelist, Reaction
from pairchat.infrastructure.auth import TokenService

from conftest import JWT_SECRET, _chat_token
from fakes import (
    AddFailingMessageRepository,
    FailingMessageRepository,
    InMemoryMessageRepository,
    RecordingEventBus,
)


@pytest.fixture()
def bus():
    return RecordingEventBus()


@pytest.fixture()
def registry():
    registry = SessionRegistry(IdentityWhitelist.from_names(["A", "B"]))
    registry.register("conn-a", "A")
    registry.register("conn-b", "B")
    registry.open("conn-unbound")
    return registry


@pytest.fixture()
def repo():
    return InMemoryMessageRepository()


@pytest.fixture()
def token_service():
    return TokenService(
        secret=JWT_SECRET,
        issuer=Config.JWT_ISSUER,
        audience=Config.JWT_AUDIENCE,
        subject=Config.TOKEN_SUBJECT,
    )


class TestSendMessage:
    @pytest.mark.asyncio
    async def test_persisted_message_is_broadcast_with_store_id(self, registry, repo, bus):
        handler = SendMessageHandler(registry, repo, bus, max_length=100)

        outcome = await handler.execute(SendMessageCommand("conn-a", body="hi"))

        assert isinstance(outcome, Persisted)
        [(target, event, payload)] = bus.sent
        assert (target, event) == ("*", "chat message")
        assert payload["id"] == 1
        assert payload["sender"] == "A"
        assert payload["message"] == "hi"
        assert payload["replyTo"] is None
        assert payload["reactions"] == []
        assert payload["persisted"] is True

    @pytest.mark.asyncio
    async def test_store_failure_still_broadcasts_without_id(self, registry, bus):
        handler = SendMessageHandler(registry, FailingMessageRepository(), bus)

        outcome = await handler.execute(SendMessageCommand("conn-b", body="still here"))

        assert isinstance(outcome, Unpersisted)
        assert outcome.message.id is None
        [(_, event, payload)] = bus.sent
        assert event == "chat message"
        assert payload["id"] is None
        assert payload["sender"] == "B"
        assert payload["persisted"] is False
        assert payload["timestamp"]

    @pytest.mark.asyncio
    async def test_unpersisted_message_is_absent_from_history(self, registry, bus):
        repo = AddFailingMessageRepository()
        await repo.seed(Message.create(sender="A", body="kept"))
        handler = SendMessageHandler(registry, repo, bus)

        outcome = await handler.execute(SendMessageCommand("conn-b", body="lost"))

        assert isinstance(outcome, Unpersisted)
        assert bus.sent[-1][2]["message"] == "lost"
        views = await GetChatHistoryHandler(repo).execute(GetChatHistoryQuery())
        assert [v.message for v in views] == ["kept"]

    @pytest.mark.asyncio
    async def test_out_of_range_reply_id_still_broadcasts(self, registry, repo, bus):
        handler = SendMessageHandler(registry, repo, bus)
        await handler.execute(
            SendMessageCommand(
                "conn-a", body="hi", reply_to={"id": 2**70, "sender": "B", "text": "x"}
            )
        )
        [(_, event, payload)] = bus.sent
        assert event == "chat message"
        assert payload["replyTo"] is None
        assert payload["persisted"] is True

    @pytest.mark.asyncio
    async def test_unbound_connection_is_dropped(self, registry, repo, bus):
        handler = SendMessageHandler(registry, repo, bus)
        assert await handler.execute(SendMessageCommand("conn-unbound", body="hi")) is None
        assert bus.sent == [] and repo.messages == {}

    @pytest.mark.parametrize("body", ["", "   ", None, {"text": "hi"}])
    @pytest.mark.asyncio
    async def test_blank_body_is_dropped(self, registry, repo, bus, body):
        handler = SendMessageHandler(registry, repo, bus)
        assert await handler.execute(SendMessageCommand("conn-a", body=body)) is None
        assert bus.sent == []

    @pytest.mark.asyncio
    async def test_too_long_body_is_dropped(self, registry, repo, bus):
        handler = SendMessageHandler(registry, repo, bus, max_length=5)
        assert await handler.execute(SendMessageCommand("conn-a", body="toolong")) is None
        assert bus.sent == []

    @pytest.mark.asyncio
    async def test_valid_reply_is_snapshotted(self, registry, repo, bus):
        handler = SendMessageHandler(registry, repo, bus)
        await handler.execute(SendMessageCommand("conn-a", body="hi"))
        await handler.execute(
            SendMessageCommand(
                "conn-b", body="yo", reply_to={"id": 1, "sender": "A", "text": "hi"}
            )
        )
        assert bus.sent[-1][2]["replyTo"] == {"id": 1, "sender": "A", "text": "hi"}
        assert repo.messages[2].reply_snapshot.id == 1

    @pytest.mark.asyncio
    async def test_incomplete_reply_is_sent_without_snapshot(self, registry, repo, bus):
        handler = SendMessageHandler(registry, repo, bus)
        await handler.execute(
            SendMessageCommand("conn-b", body="yo", reply_to={"id": 1, "sender": "A"})
        )
        assert bus.sent[-1][2]["replyTo"] is None
        assert repo.messages[1].reply_snapshot is None


class TestToggleReaction:
    @pytest_asyncio.fixture
    async def message_id(self, repo):
        stored = await repo.add(Message.create(sender="A", body="hi"))
        return stored.id.value

    @pytest.mark.asyncio
    async def test_toggle_twice_restores_original_set(self, registry, repo, bus, message_id):
        handler = ToggleReactionHandler(registry, repo, bus, KeyedLock())

        first = await handler.execute(ToggleReactionCommand("conn-a", message_id, "👍"))
        second = await handler.execute(ToggleReactionCommand("conn-a", message_id, "👍"))

        assert first == [Reaction("A", "👍")]
        assert second == []
        assert [payload for _, _, payload in bus.sent] == [
            {"messageId": message_id, "reactions": [{"user": "A", "emoji": "👍"}]},
            {"messageId": message_id, "reactions": []},
        ]

    @pytest.mark.asyncio
    async def test_reaction_user_is_the_bound_identity(self, registry, repo, bus, message_id):
        handler = ToggleReactionHandler(registry, repo, bus, KeyedLock())
        await handler.execute(ToggleReactionCommand("conn-b", str(message_id), "🎉"))
        assert repo.messages[message_id].reactions == [Reaction("B", "🎉")]

    @pytest.mark.asyncio
    async def test_concurrent_toggles_are_not_lost(self, registry, bus):
        repo = InMemoryMessageRepository(yield_between_calls=True)
        stored = await repo.add(Message.create(sender="A", body="hi"))
        locks = KeyedLock()
        handler = ToggleReactionHandler(registry, repo, bus, locks)

        await asyncio.gather(
            handler.execute(ToggleReactionCommand("conn-a", stored.id.value, "👍")),
            handler.execute(ToggleReactionCommand("conn-b", stored.id.value, "❤️")),
        )

        assert set(repo.messages[1].reactions) == {Reaction("A", "👍"), Reaction("B", "❤️")}
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_unknown_message_is_not_broadcast(self, registry, repo, bus):
        handler = ToggleReactionHandler(registry, repo, bus, KeyedLock())
        assert await handler.execute(ToggleReactionCommand("conn-a", 404, "👍")) is None
        assert bus.sent == []

    @pytest.mark.asyncio
    async def test_store_failure_is_not_broadcast(self, registry, bus):
        handler = ToggleReactionHandler(registry, FailingMessageRepository(), bus, KeyedLock())
        assert await handler.execute(ToggleReactionCommand("conn-a", 1, "👍")) is None
        assert bus.sent == []

    @pytest.mark.parametrize(
        "connection_id, message_id, emoji",
        [
            ("conn-unbound", 1, "👍"),
            ("conn-a", 0, "👍"),
            ("conn-a", True, "👍"),
            ("conn-a", None, "👍"),
            ("conn-a", 2**70, "👍"),
            ("conn-a", "²", "👍"),
            ("conn-a", "١", "👍"),
            ("conn-a", 1, ""),
            ("conn-a", 1, None),
            ("conn-a", 1, "x" * 40),
        ],
    )
    @pytest.mark.asyncio
    async def test_invalid_toggle_is_dropped(
        self, registry, repo, bus, message_id, connection_id, emoji
    ):
        handler = ToggleReactionHandler(registry, repo, bus, KeyedLock(), max_emoji_length=32)
        await repo.add(Message.create(sender="A", body="hi"))
        assert (
            await handler.execute(ToggleReactionCommand(connection_id, message_id, emoji))
            is None
        )
        assert bus.sent == []


class TestTyping:
    @pytest.mark.asyncio
    async def test_typing_goes_to_everyone_but_the_sender(self, registry, bus):
        handler = TypingHandler(registry, bus)
        await handler.execute(TypingCommand("conn-a", active=True))
        await handler.execute(TypingCommand("conn-a", active=False))
        assert bus.sent == [
            ("!conn-a", "typing", {"sender": "A"}),
            ("!conn-a", "stop typing", {"sender": "A"}),
        ]

    @pytest.mark.asyncio
    async def test_unbound_typing_is_dropped(self, registry, bus):
        await TypingHandler(registry, bus).execute(TypingCommand("conn-unbound", active=True))
        assert bus.sent == []


class TestHistory:
    @pytest.mark.asyncio
    async def test_history_is_oldest_first(self, repo):
        for body in ("one", "two"):
            await repo.add(Message.create(sender="A", body=body))
        views = await GetChatHistoryHandler(repo).execute(GetChatHistoryQuery())
        assert [v.message for v in views] == ["one", "two"]
        assert views[0].to_payload()["replyTo"] is None

    @pytest.mark.asyncio
    async def test_store_failure_yields_empty_history(self):
        views = await GetChatHistoryHandler(FailingMessageRepository()).execute(
            GetChatHistoryQuery()
        )
        assert views == []


class TestJoin:
    def _handler(self, registry, bus, repo, token_service, require_token=True):
        return JoinHandler(
            registry=registry,
            token_service=token_service,
            presence=PresenceBroadcaster(registry, bus),
            event_bus=bus,
            history_handler=GetChatHistoryHandler(repo),
            require_token=require_token,
        )

    @pytest.fixture()
    def fresh_registry(self):
        return SessionRegistry(IdentityWhitelist.from_names(["A", "B"]))

    @pytest.mark.asyncio
    async def test_join_publishes_presence_then_history(
        self, fresh_registry, bus, repo, token_service
    ):
        await repo.add(Message.create(sender="B", body="earlier"))
        connection_id = await bus.connect()
        fresh_registry.open(connection_id)
        handler = self._handler(fresh_registry, bus, repo, token_service)

        session = await handler.execute(JoinCommand(connection_id, "A", _chat_token()))

        assert session.identity == "A"
        assert bus.sent[0] == ("*", "online users", ["A"])
        target, event, history = bus.sent[1]
        assert (target, event) == (connection_id, "history")
        assert [m["message"] for m in history] == ["earlier"]

    @pytest.mark.parametrize(
        "identity, token",
        [
            ("A", None),
            ("A", "garbage"),
            ("A", _chat_token(exp_offset=-10)),
            ("mallory", _chat_token()),
        ],
    )
    @pytest.mark.asyncio
    async def test_rejected_join_notifies_and_closes(
        self, fresh_registry, bus, repo, token_service, identity, token
    ):
        connection_id = await bus.connect()
        fresh_registry.open(connection_id)
        handler = self._handler(fresh_registry, bus, repo, token_service)

        assert await handler.execute(JoinCommand(connection_id, identity, token)) is None

        [(target, event, payload)] = bus.sent
        assert (target, event) == (connection_id, "auth_error")
        assert payload["message"]
        assert bus.closed[0][0] == connection_id
        assert fresh_registry.identity_of(connection_id) is None
        assert fresh_registry.online_identities() == []

    @pytest.mark.asyncio
    async def test_tokenless_join_when_tokens_not_required(
        self, fresh_registry, bus, repo, token_service
    ):
        connection_id = await bus.connect()
        handler = self._handler(fresh_registry, bus, repo, token_service, require_token=False)
        session = await handler.execute(JoinCommand(connection_id, "B"))
        assert session.identity == "B"

    @pytest.mark.asyncio
    async def test_rejoin_on_bound_connection_is_ignored(
        self, fresh_registry, bus, repo, token_service
    ):
        connection_id = await bus.connect()
        handler = self._handler(fresh_registry, bus, repo, token_service)
        await handler.execute(JoinCommand(connection_id, "A", _chat_token()))
        sent_before = len(bus.sent)

        session = await handler.execute(JoinCommand(connection_id, "B", _chat_token()))

        assert session.identity == "A"
        assert len(bus.sent) == sent_before
