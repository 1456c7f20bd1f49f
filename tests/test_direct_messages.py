"""Direct message history between two users."""
from __future__ import annotations

import pytest

from socialfeed.errors import EmptyMessage, Forbidden, NotAuthenticated, NotFound

from feed_helpers import signup


@pytest.fixture
def pair(client_factory):
    alice = client_factory()
    bob = client_factory()
    signup(alice, "alice")
    signup(bob, "bob")
    return alice, bob


def test_conversation_is_returned_in_send_order(pair):
    alice, bob = pair

    sent = alice.post("/dm/alice/bob", json={"message": "hi"})
    bob.post("/dm/bob/alice", json={"message": "yo"})

    assert sent.status_code == 200
    assert sent.json()["success"] is True
    assert sent.json()["dm"]["from"] == "alice"
    assert sent.json()["dm"]["to"] == "bob"

    for client, path in ((alice, "/dm/alice/bob"), (bob, "/dm/bob/alice")):
        history = client.get(path).json()
        assert [(m["from"], m["to"], m["text"]) for m in history] == [
            ("alice", "bob", "hi"),
            ("bob", "alice", "yo"),
        ]


def test_sender_comes_from_session_not_path_order(pair):
    alice, _ = pair

    response = alice.post("/dm/bob/alice", json={"message": "hello"})

    assert response.json()["dm"]["from"] == "alice"
    assert response.json()["dm"]["to"] == "bob"


def test_cannot_send_as_someone_else(pair, client_factory):
    alice, _ = pair
    signup(client_factory(), "carol")

    response = alice.post("/dm/bob/carol", json={"message": "spoof"})

    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"


def test_third_party_cannot_read_thread(pair, client_factory):
    alice, _ = pair
    alice.post("/dm/alice/bob", json={"message": "secret"})
    carol = client_factory()
    signup(carol, "carol")

    response = carol.get("/dm/alice/bob")

    assert response.status_code == 403
    assert response.json()["success"] is False


def test_reading_requires_session(pair, client_factory):
    response = client_factory().get("/dm/alice/bob")

    assert response.status_code == 401


@pytest.mark.parametrize("payload", [{"message": "   "}, {"message": ""}, {}])
def test_blank_message_is_rejected(pair, payload):
    alice, _ = pair

    response = alice.post("/dm/alice/bob", json=payload)

    assert response.status_code == 400
    assert response.json()["message"] == "Message cannot be empty"
    assert alice.get("/dm/alice/bob").json() == []


def test_unknown_recipient_is_not_found(pair):
    alice, _ = pair

    response = alice.post("/dm/alice/nobody", json={"message": "hi"})

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_empty_thread_is_an_empty_list(pair):
    alice, _ = pair

    assert alice.get("/dm/alice/bob").json() == []


def test_message_log_service(services):
    alice, _ = services.sessions.signup("alice", "pw123")
    bob, _ = services.sessions.signup("bob", "pw123")
    carol, _ = services.sessions.signup("carol", "pw123")

    services.messages.send(alice, "bob", "  hi  ")
    services.messages.send(bob, "alice", "yo")
    services.messages.send(alice, "carol", "unrelated")

    history = services.messages.history("bob", "alice")
    assert [(m.from_username, m.text) for m in history] == [("alice", "hi"), ("bob", "yo")]
    assert history[0].timestamp.tzinfo is not None

    with pytest.raises(Forbidden):
        services.messages.history("alice", "bob", viewer=carol)
    with pytest.raises(NotAuthenticated):
        services.messages.send(None, "bob", "hi")
    with pytest.raises(EmptyMessage):
        services.messages.send(alice, "bob", "\n")
    with pytest.raises(NotFound):
        services.messages.send(alice, "nobody", "hi")
