"""Group chat: message history, posting and channel delivery."""

import json

import pytest
from starlette.websockets import WebSocketDisconnect


def _group(client, owner, is_public=True):
    r = client.post("/groups", json={"title": "Chat", "is_public": is_public}, headers=owner["headers"])
    return r.json()["id"]


def _join(ws, group_id):
    ws.send_text(json.dumps({"event": "join-group", "data": group_id}))
    return ws.receive_json()


def test_post_and_list_messages(client, make_user):
    owner = make_user("chat")
    group_id = _group(client, owner)
    r = client.post(f"/groups/{group_id}/messages", json={"message": "  hello  "}, headers=owner["headers"])
    assert r.status_code == 200
    message = r.json()
    assert message["message"] == "hello"
    assert message["author"]["display_name"] == owner["display_name"]

    client.post(f"/groups/{group_id}/messages", json={"message": "second"}, headers=owner["headers"])
    history = client.get(f"/groups/{group_id}/messages").json()
    assert [m["message"] for m in history] == ["hello", "second"]


def test_private_group_messages_need_membership(client, make_user):
    owner = make_user("chat")
    outsider = make_user("out")
    group_id = _group(client, owner, is_public=False)
    r = client.post(f"/groups/{group_id}/messages", json={"message": "let me in"}, headers=outsider["headers"])
    assert r.status_code == 403
    assert client.get(f"/groups/{group_id}/messages", headers=outsider["headers"]).status_code == 403
    assert client.get(f"/groups/{group_id}/messages", headers=owner["headers"]).json() == []


def test_blank_message_rejected(client, make_user):
    owner = make_user("chat")
    group_id = _group(client, owner)
    assert client.post(f"/groups/{group_id}/messages", json={"message": "   "}, headers=owner["headers"]).status_code == 400


def test_ws_requires_token(client):
    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect("/ws"):
            pass
    assert exc.value.code == 4001

    with pytest.raises(WebSocketDisconnect) as exc:
        with client.websocket_connect("/ws?token=garbage"):
            pass
    assert exc.value.code == 4003


def test_ws_ping(client, make_user):
    user = make_user("ping")
    with client.websocket_connect(f"/ws?token={user['token']}") as ws:
        ws.send_text("ping")
        assert ws.receive_json() == {"event": "pong"}


def test_joined_subscriber_receives_new_message(client, make_user):
    owner = make_user("chat")
    listener = make_user("lsn")
    group_id = _group(client, owner)

    with client.websocket_connect(f"/ws?token={listener['token']}") as ws:
        ack = _join(ws, group_id)
        assert ack == {"event": "joined-group", "data": {"group_id": group_id}}

        posted = client.post(
            f"/groups/{group_id}/messages", json={"message": "live!"}, headers=owner["headers"]
        ).json()
        frame = ws.receive_json()
        assert frame["event"] == "new-message"
        assert frame["data"]["id"] == posted["id"]
        assert frame["data"]["message"] == "live!"
        assert frame["data"]["author"]["id"] == owner["id"]


def test_left_subscriber_stops_receiving(client, make_user):
    owner = make_user("chat")
    listener = make_user("lsn")
    group_id = _group(client, owner)

    with client.websocket_connect(f"/ws?token={listener['token']}") as ws:
        _join(ws, group_id)
        ws.send_text(json.dumps({"event": "leave-group", "data": group_id}))
        assert ws.receive_json()["event"] == "left-group"

        client.post(f"/groups/{group_id}/messages", json={"message": "gone"}, headers=owner["headers"])
        ws.send_text("ping")
        assert ws.receive_json() == {"event": "pong"}


def test_leaving_group_stops_channel_delivery(client, make_user):
    owner = make_user("chat")
    member = make_user("mbr")
    group_id = _group(client, owner)
    assert client.post(f"/groups/{group_id}/join", headers=member["headers"]).status_code == 200

    with client.websocket_connect(f"/ws?token={member['token']}") as ws:
        assert _join(ws, group_id)["event"] == "joined-group"
        assert client.post(f"/groups/{group_id}/leave", headers=member["headers"]).status_code == 200
        r = client.put(f"/groups/{group_id}", json={"is_public": False}, headers=owner["headers"])
        assert r.status_code == 200
        assert client.get(f"/groups/{group_id}/messages", headers=member["headers"]).status_code == 403

        client.post(f"/groups/{group_id}/messages", json={"message": "secret"}, headers=owner["headers"])
        ws.send_text("ping")
        assert ws.receive_json() == {"event": "pong"}


def test_group_turning_private_drops_non_member_subscribers(client, make_user):
    owner = make_user("chat")
    member = make_user("mbr")
    viewer = make_user("view")
    group_id = _group(client, owner)
    client.post(f"/groups/{group_id}/join", headers=member["headers"])

    with client.websocket_connect(f"/ws?token={viewer['token']}") as outsider_ws, client.websocket_connect(
        f"/ws?token={member['token']}"
    ) as member_ws:
        assert _join(outsider_ws, group_id)["event"] == "joined-group"
        assert _join(member_ws, group_id)["event"] == "joined-group"

        client.put(f"/groups/{group_id}", json={"is_public": False}, headers=owner["headers"])
        client.post(f"/groups/{group_id}/messages", json={"message": "members only"}, headers=owner["headers"])

        frame = member_ws.receive_json()
        assert frame["event"] == "new-message"
        assert frame["data"]["message"] == "members only"
        outsider_ws.send_text("ping")
        assert outsider_ws.receive_json() == {"event": "pong"}


def test_private_group_message_not_delivered_to_outsider(client, make_user):
    owner = make_user("chat")
    outsider = make_user("out")
    group_id = _group(client, owner, is_public=False)

    with client.websocket_connect(f"/ws?token={outsider['token']}") as ws:
        ack = _join(ws, group_id)
        assert ack["event"] == "error"

        r = client.post(f"/groups/{group_id}/messages", json={"message": "secret"}, headers=owner["headers"])
        assert r.status_code == 200
        # Anything queued for this socket would arrive before the pong
        ws.send_text("ping")
        assert ws.receive_json() == {"event": "pong"}


def test_join_unknown_group_and_bad_frames(client, make_user):
    user = make_user("bad")
    with client.websocket_connect(f"/ws?token={user['token']}") as ws:
        assert _join(ws, 999999)["event"] == "error"
        ws.send_text("not json")
        assert ws.receive_json()["event"] == "error"
        ws.send_text(json.dumps({"event": "join-group"}))
        assert ws.receive_json()["event"] == "error"


def test_invitee_gets_live_notification(client, make_user):
    owner = make_user("own")
    guest = make_user("gst")
    group_id = _group(client, owner, is_public=False)

    with client.websocket_connect(f"/ws?token={guest['token']}") as ws:
        client.post(f"/groups/{group_id}/invite", json={"email": guest["email"]}, headers=owner["headers"])
        frame = ws.receive_json()
        assert frame["event"] == "notification"
        assert frame["data"]["type"] == "group_invitation"
