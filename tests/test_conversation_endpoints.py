from __future__ import annotations


def _unread(client, user, conversation_id: int) -> int:
    listing = client.get("/api/conversations", headers=user["headers"]).json()
    return next(c["unread_count"] for c in listing if c["id"] == conversation_id)


def test_start_conversation_is_order_independent(client, signup) -> None:
    ana = signup("ana")
    ben = signup("ben")

    from_ana = client.post("/api/conversations", json={"other_user_id": ben["id"]}, headers=ana["headers"])
    from_ben = client.post("/api/conversations", json={"other_user_id": ana["id"]}, headers=ben["headers"])

    assert from_ana.status_code == 200
    assert from_ben.status_code == 200
    assert from_ana.json()["id"] == from_ben.json()["id"]
    assert from_ana.json()["other_user"]["username"] == "ben"
    assert from_ben.json()["other_user"]["username"] == "ana"
    assert from_ana.json()["user1_id"] == min(ana["id"], ben["id"])


def test_send_read_flow(client, signup) -> None:
    ana = signup("ana")
    ben = signup("ben")
    client.post("/api/profile", json={"full_name": "Ana A"}, headers=ana["headers"])

    for text in ("Hi Ben!", "Still looking for a room?"):
        r = client.post("/api/messages", json={"receiver_id": ben["id"], "content": text}, headers=ana["headers"])
        assert r.status_code == 201
        assert r.json()["read"] is False

    [conversation] = client.get("/api/conversations", headers=ben["headers"]).json()
    assert conversation["unread_count"] == 2
    assert conversation["other_user"] == {"id": ana["id"], "username": "ana", "full_name": "Ana A", "avatar_url": None}

    # Opening the conversation marks Ben's messages read.
    messages = client.get(f"/api/conversations/{conversation['id']}/messages", headers=ben["headers"])
    assert messages.status_code == 200
    body = messages.json()
    assert [m["content"] for m in body] == ["Hi Ben!", "Still looking for a room?"]
    assert all(m["read"] for m in body)
    assert _unread(client, ana, conversation["id"]) == 0

    reply = client.post("/api/messages", json={"receiver_id": ana["id"], "content": "Yes!"}, headers=ben["headers"])
    assert reply.status_code == 201
    assert _unread(client, ana, conversation["id"]) == 1

    mark = client.post(f"/api/conversations/{conversation['id']}/read", headers=ana["headers"])
    assert mark.status_code == 204
    assert _unread(client, ana, conversation["id"]) == 0


def test_conversations_listed_most_recent_first(client, signup) -> None:
    me = signup("me_user")
    bob = signup("bob")
    carol = signup("carol")

    bob_conv = client.post("/api/conversations", json={"other_user_id": bob["id"]}, headers=me["headers"]).json()
    carol_conv = client.post("/api/conversations", json={"other_user_id": carol["id"]}, headers=me["headers"]).json()
    listing = client.get("/api/conversations", headers=me["headers"]).json()
    assert [c["id"] for c in listing] == [carol_conv["id"], bob_conv["id"]]

    client.post("/api/messages", json={"receiver_id": me["id"], "content": "hey"}, headers=bob["headers"])
    listing = client.get("/api/conversations", headers=me["headers"]).json()
    assert [c["id"] for c in listing] == [bob_conv["id"], carol_conv["id"]]


def test_outsiders_cannot_read_conversation(client, signup) -> None:
    ana = signup("ana")
    ben = signup("ben")
    eve = signup("eve")
    client.post("/api/messages", json={"receiver_id": ben["id"], "content": "private"}, headers=ana["headers"])
    [conversation] = client.get("/api/conversations", headers=ana["headers"]).json()

    r = client.get(f"/api/conversations/{conversation['id']}/messages", headers=eve["headers"])
    assert r.status_code == 404
    assert client.post(f"/api/conversations/{conversation['id']}/read", headers=eve["headers"]).status_code == 404
    assert _unread(client, ana, conversation["id"]) == 1


def test_send_errors(client, signup) -> None:
    ana = signup("ana")

    missing = client.post("/api/messages", json={"receiver_id": 9999, "content": "hello?"}, headers=ana["headers"])
    assert missing.status_code == 404
    assert missing.json() == {"detail": "Recipient not found", "entity": "user"}

    to_self = client.post("/api/messages", json={"receiver_id": ana["id"], "content": "me"}, headers=ana["headers"])
    assert to_self.status_code == 422
    assert to_self.json()["field"] == "receiver_id"

    blank = client.post("/api/messages", json={"receiver_id": ana["id"], "content": "   "}, headers=ana["headers"])
    assert blank.status_code == 422

    no_receiver = client.post("/api/messages", json={"content": "hi"}, headers=ana["headers"])
    assert no_receiver.status_code == 422

    unknown = client.post("/api/conversations", json={"other_user_id": 9999}, headers=ana["headers"])
    assert unknown.status_code == 404


def test_message_content_is_stored_as_sent(client, signup) -> None:
    ana = signup("ana")
    ben = signup("ben")
    text = "Rent split:\n  - Ana: 600\n  - Ben: 600\n"

    sent = client.post("/api/messages", json={"receiver_id": ben["id"], "content": text}, headers=ana["headers"])
    assert sent.status_code == 201
    assert sent.json()["content"] == text

    [conversation] = client.get("/api/conversations", headers=ben["headers"]).json()
    messages = client.get(f"/api/conversations/{conversation['id']}/messages", headers=ben["headers"]).json()
    assert [m["content"] for m in messages] == [text]
