"""
End-to-end chat scenarios over the /ws endpoint.

Both participants connect through one TestClient, so they share the
application's event loop, session registry and event bus.
"""

import pytest
from starlette.websockets import WebSocketDisconnect

from pairchat.presentation.realtime.chat_socket import EVENT_HANDLERS

from conftest import SECRET_PHRASE, _chat_token


def send(ws, event, data=None):
    ws.send_json({"event": event, "data": data or {}})


def receive(ws, expected_event):
    frame = ws.receive_json()
    assert frame["event"] == expected_event, frame
    return frame["data"]


def login(client):
    response = client.post("/api/auth/login", json={"secretPhrase": SECRET_PHRASE})
    assert response.status_code == 200
    return response.json()["token"]


def join(ws, identity, token):
    send(ws, "join", {"identity": identity, "token": token})


def test_login_then_join_sends_presence_and_empty_history(client):
    token = login(client)
    with client.websocket_connect("/ws") as ws_a:
        join(ws_a, "A", token)
        assert receive(ws_a, "online users") == ["A"]
        assert receive(ws_a, "history") == []


def test_second_participant_sees_both_online(client):
    token = login(client)
    with client.websocket_connect("/ws") as ws_a, client.websocket_connect("/ws") as ws_b:
        join(ws_a, "A", token)
        receive(ws_a, "online users")
        receive(ws_a, "history")

        join(ws_b, "B", token)
        assert receive(ws_a, "online users") == ["A", "B"]
        assert receive(ws_b, "online users") == ["A", "B"]
        assert receive(ws_b, "history") == []


def test_full_conversation(client):
    token = login(client)
    with client.websocket_connect("/ws") as ws_a, client.websocket_connect("/ws") as ws_b:
        join(ws_a, "A", token)
        receive(ws_a, "online users")
        receive(ws_a, "history")
        join(ws_b, "B", token)
        receive(ws_a, "online users")
        receive(ws_b, "online users")
        receive(ws_b, "history")

        # first message gets id 1; a forged sender is ignored
        send(ws_a, "chat message", {"body": "hi", "sender": "B"})
        for ws in (ws_a, ws_b):
            message = receive(ws, "chat message")
            assert message["id"] == 1
            assert message["sender"] == "A"
            assert message["message"] == "hi"
            assert message["replyTo"] is None
            assert message["reactions"] == []
            assert message["persisted"] is True

        # reply carries the snapshot of message 1
        send(
            ws_b,
            "chat message",
            {"message": "hello", "replyTo": {"id": 1, "sender": "A", "text": "hi"}},
        )
        for ws in (ws_a, ws_b):
            reply = receive(ws, "chat message")
            assert reply["id"] == 2
            assert reply["sender"] == "B"
            assert reply["replyTo"] == {"id": 1, "sender": "A", "text": "hi"}

        # toggling the same emoji twice leaves no reaction
        send(ws_a, "toggle reaction", {"messageId": 1, "emoji": "👍", "user": "B"})
        for ws in (ws_a, ws_b):
            assert receive(ws, "reaction updated") == {
                "messageId": 1,
                "reactions": [{"user": "A", "emoji": "👍"}],
            }
        send(ws_a, "toggle reaction", {"messageId": 1, "emoji": "👍"})
        for ws in (ws_a, ws_b):
            assert receive(ws, "reaction updated") == {"messageId": 1, "reactions": []}

        # typing reaches the other side only
        send(ws_b, "typing", {"sender": "A"})
        assert receive(ws_a, "typing") == {"sender": "B"}
        send(ws_b, "stop typing")
        assert receive(ws_a, "stop typing") == {"sender": "B"}
        send(ws_b, "toggle reaction", {"messageId": 2, "emoji": "🎉"})
        # B's own next frame is the reaction, not an echo of its typing
        assert receive(ws_b, "reaction updated")["messageId"] == 2
        receive(ws_a, "reaction updated")

        ws_b.close()
        assert receive(ws_a, "online users") == ["A"]

    # a reconnecting participant gets the whole backlog
    with client.websocket_connect("/ws") as ws_b:
        join(ws_b, "B", token)
        receive(ws_b, "online users")
        history = receive(ws_b, "history")
        assert [m["id"] for m in history] == [1, 2]
        assert history[0]["reactions"] == []
        assert history[1]["replyTo"] == {"id": 1, "sender": "A", "text": "hi"}
        assert history[1]["reactions"] == [{"user": "B", "emoji": "🎉"}]
        assert "persisted" not in history[0]


@pytest.mark.parametrize(
    "identity, token",
    [
        ("A", None),
        ("A", "not-a-token"),
        ("A", _chat_token(exp_offset=-60)),
        ("mallory", _chat_token()),
    ],
)
def test_rejected_join_gets_auth_error_and_is_closed(client, identity, token):
    with client.websocket_connect("/ws") as ws:
        join(ws, identity, token)
        assert receive(ws, "auth_error")["message"]
        with pytest.raises(WebSocketDisconnect) as exc_info:
            ws.receive_json()
        assert exc_info.value.code == 1008


def test_rejected_connection_never_appears_online(client, chat_token):
    with client.websocket_connect("/ws") as ws_a:
        join(ws_a, "A", chat_token)
        receive(ws_a, "online users")
        receive(ws_a, "history")

        with client.websocket_connect("/ws") as intruder:
            join(intruder, "mallory", chat_token)
            receive(intruder, "auth_error")

        # the next frame A sees is its own message, not a presence change
        send(ws_a, "chat message", {"body": "still alone?"})
        assert receive(ws_a, "chat message")["message"] == "still alone?"


def test_events_before_join_are_ignored(client, chat_token):
    with client.websocket_connect("/ws") as ws:
        send(ws, "chat message", {"body": "too early"})
        send(ws, "typing")
        ws.send_text("not json")
        send(ws, "no such event")
        join(ws, "A", chat_token)
        assert receive(ws, "online users") == ["A"]
        assert receive(ws, "history") == []


def test_blank_message_is_not_broadcast(client, chat_token):
    with client.websocket_connect("/ws") as ws:
        join(ws, "A", chat_token)
        receive(ws, "online users")
        receive(ws, "history")

        send(ws, "chat message", {"body": "   "})
        send(ws, "chat message", {"body": "real"})
        message = receive(ws, "chat message")
        assert message["message"] == "real"
        assert message["id"] == 1


def test_same_identity_twice_is_listed_once(client, chat_token):
    with client.websocket_connect("/ws") as first, client.websocket_connect("/ws") as second:
        join(first, "A", chat_token)
        receive(first, "online users")
        receive(first, "history")
        join(second, "A", chat_token)
        assert receive(first, "online users") == ["A"]
        assert receive(second, "online users") == ["A"]


@pytest.mark.parametrize(
    "event, data",
    [
        ("toggle reaction", {"messageId": 2**70, "emoji": "👍"}),
        ("toggle reaction", {"messageId": "²", "emoji": "👍"}),
    ],
)
def test_bad_reaction_frame_keeps_session_alive(client, chat_token, event, data):
    with client.websocket_connect("/ws") as ws:
        join(ws, "A", chat_token)
        receive(ws, "online users")
        receive(ws, "history")

        send(ws, event, data)
        send(ws, "chat message", {"body": "still connected"})
        assert receive(ws, "chat message")["message"] == "still connected"


def test_out_of_range_reply_is_sent_without_snapshot(client, chat_token):
    with client.websocket_connect("/ws") as ws:
        join(ws, "A", chat_token)
        receive(ws, "online users")
        receive(ws, "history")

        send(
            ws,
            "chat message",
            {"body": "hi", "replyTo": {"id": 2**70, "sender": "B", "text": "x"}},
        )
        message = receive(ws, "chat message")
        assert message["replyTo"] is None
        assert message["persisted"] is True
        assert message["id"] == 1


def test_handler_crash_is_logged_and_session_survives(client, chat_token, monkeypatch, caplog):
    async def explode(container, connection_id, data):
        raise RuntimeError("handler bug")

    monkeypatch.setitem(EVENT_HANDLERS, "explode", explode)
    with client.websocket_connect("/ws") as ws:
        join(ws, "A", chat_token)
        receive(ws, "online users")
        receive(ws, "history")

        send(ws, "explode")
        send(ws, "chat message", {"body": "after the crash"})
        assert receive(ws, "chat message")["message"] == "after the crash"
    assert "handler bug" in caplog.text
