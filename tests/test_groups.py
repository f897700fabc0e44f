"""Group membership, roles and invitation tests."""

from cineconnect.models.group_membership import GroupMembership


def _create_group(client, owner, **fields):
    body = {"title": "Noir nights", "description": "Black and white crime", "theme": "noir", "is_public": True}
    body.update(fields)
    r = client.post("/groups", json=body, headers=owner["headers"])
    assert r.status_code == 200, r.text
    return r.json()


def test_creator_becomes_admin(client, make_user):
    owner = make_user("own")
    group = _create_group(client, owner)
    details = client.get(f"/groups/{group['id']}", headers=owner["headers"]).json()
    assert details["user_role"] == "admin"
    assert details["member_count"] == 1
    assert details["members"][0]["id"] == owner["id"]
    assert details["members"][0]["role"] == "admin"


def test_join_and_leave_public_group(client, make_user):
    owner = make_user("own")
    member = make_user("mem")
    group = _create_group(client, owner)

    r = client.post(f"/groups/{group['id']}/join", headers=member["headers"])
    assert r.status_code == 200
    assert r.json()["role"] == "member"
    assert client.post(f"/groups/{group['id']}/join", headers=member["headers"]).status_code == 409

    assert client.post(f"/groups/{group['id']}/leave", headers=member["headers"]).status_code == 200
    assert client.post(f"/groups/{group['id']}/leave", headers=member["headers"]).status_code == 404


def test_join_missing_or_private_group(client, make_user):
    owner = make_user("own")
    other = make_user("oth")
    private = _create_group(client, owner, is_public=False)
    assert client.post("/groups/999999/join", headers=other["headers"]).status_code == 404
    assert client.post(f"/groups/{private['id']}/join", headers=other["headers"]).status_code == 403


def test_admin_can_never_leave(client, make_user, db_session):
    owner = make_user("own")
    group = _create_group(client, owner)
    # Another admin-level member does not change the rule
    co_admin = make_user("coadm")
    db_session.add(GroupMembership(group_id=group["id"], user_id=co_admin["id"], role="admin"))
    db_session.commit()

    assert client.post(f"/groups/{group['id']}/leave", headers=owner["headers"]).status_code == 403
    assert client.post(f"/groups/{group['id']}/leave", headers=co_admin["headers"]).status_code == 403


def test_update_requires_admin_or_moderator(client, make_user, db_session):
    owner = make_user("own")
    member = make_user("mem")
    moderator = make_user("mod")
    group = _create_group(client, owner)
    client.post(f"/groups/{group['id']}/join", headers=member["headers"])
    db_session.add(GroupMembership(group_id=group["id"], user_id=moderator["id"], role="moderator"))
    db_session.commit()

    r = client.put(f"/groups/{group['id']}", json={"title": "Hijacked"}, headers=member["headers"])
    assert r.status_code == 403
    r = client.put(f"/groups/{group['id']}", json={"title": "Neo-noir"}, headers=moderator["headers"])
    assert r.status_code == 200
    assert r.json()["title"] == "Neo-noir"
    r = client.put(f"/groups/{group['id']}", json={}, headers=owner["headers"])
    assert r.status_code == 400

    # Deletion is admin only
    assert client.delete(f"/groups/{group['id']}", headers=moderator["headers"]).status_code == 403


def test_delete_group_cascades(client, make_user, make_film):
    owner = make_user("own")
    group = _create_group(client, owner)
    film_id = make_film()
    client.post(f"/groups/{group['id']}/films", json={"film_id": film_id}, headers=owner["headers"])
    client.post(f"/groups/{group['id']}/messages", json={"message": "bye"}, headers=owner["headers"])

    assert client.delete(f"/groups/{group['id']}", headers=owner["headers"]).status_code == 200
    assert client.get(f"/groups/{group['id']}", headers=owner["headers"]).status_code == 404
    assert client.get(f"/users/{owner['id']}/groups").json() == []


def test_invite_creates_invitation_and_notification(client, make_user):
    owner = make_user("own")
    guest = make_user("gst")
    group = _create_group(client, owner, is_public=False)

    r = client.post(f"/groups/{group['id']}/invite", json={"email": guest["email"]}, headers=owner["headers"])
    assert r.status_code == 200
    invitation = r.json()
    assert invitation["status"] == "pending"
    assert invitation["invitee_id"] == guest["id"]

    notifications = client.get("/notifications", headers=guest["headers"]).json()
    assert notifications[0]["type"] == "group_invitation"
    assert notifications[0]["is_read"] is False

    pending = client.get("/groups/invitations", headers=guest["headers"]).json()
    assert [i["id"] for i in pending] == [invitation["id"]]
    assert pending[0]["group_title"] == group["title"]

    # Accepting joins even a private group
    r = client.post(f"/groups/invitations/{invitation['id']}/accept", headers=guest["headers"])
    assert r.status_code == 200
    assert r.json()["role"] == "member"
    assert client.get(f"/groups/{group['id']}", headers=guest["headers"]).status_code == 200
    assert client.post(f"/groups/invitations/{invitation['id']}/accept", headers=guest["headers"]).status_code == 409


def test_invite_guards(client, make_user):
    owner = make_user("own")
    member = make_user("mem")
    group = _create_group(client, owner)
    client.post(f"/groups/{group['id']}/join", headers=member["headers"])

    r = client.post(f"/groups/{group['id']}/invite", json={"email": owner["email"]}, headers=member["headers"])
    assert r.status_code == 403
    r = client.post(f"/groups/{group['id']}/invite", json={"email": member["email"]}, headers=owner["headers"])
    assert r.status_code == 409
    r = client.post(f"/groups/{group['id']}/invite", json={"email": "nobody@test.com"}, headers=owner["headers"])
    assert r.status_code == 404


def test_decline_invitation(client, make_user):
    owner = make_user("own")
    guest = make_user("gst")
    group = _create_group(client, owner, is_public=False)
    invitation = client.post(
        f"/groups/{group['id']}/invite", json={"email": guest["email"]}, headers=owner["headers"]
    ).json()

    # Only the invitee answers
    assert client.post(f"/groups/invitations/{invitation['id']}/decline", headers=owner["headers"]).status_code == 404
    r = client.post(f"/groups/invitations/{invitation['id']}/decline", headers=guest["headers"])
    assert r.status_code == 200
    assert r.json()["status"] == "declined"
    assert client.get("/groups/invitations", headers=guest["headers"]).json() == []


def test_private_groups_hidden_from_outsiders(client, make_user):
    owner = make_user("own")
    outsider = make_user("out")
    private = _create_group(client, owner, is_public=False)

    assert client.get(f"/groups/{private['id']}", headers=outsider["headers"]).status_code == 403
    assert private["id"] not in [g["id"] for g in client.get("/groups", headers=outsider["headers"]).json()]
    assert private["id"] in [g["id"] for g in client.get("/groups", headers=owner["headers"]).json()]


def test_add_film(client, make_user, make_film):
    owner = make_user("own")
    outsider = make_user("out")
    group = _create_group(client, owner)
    film_id = make_film()

    assert client.post(f"/groups/{group['id']}/films", json={"film_id": film_id}, headers=outsider["headers"]).status_code == 403
    assert client.post(f"/groups/{group['id']}/films", json={"film_id": 999999}, headers=owner["headers"]).status_code == 404
    assert client.post(f"/groups/{group['id']}/films", json={"film_id": film_id}, headers=owner["headers"]).status_code == 200
    assert client.post(f"/groups/{group['id']}/films", json={"film_id": film_id}, headers=owner["headers"]).status_code == 409

    details = client.get(f"/groups/{group['id']}").json()
    assert [f["film_id"] for f in details["films"]] == [film_id]
    assert details["film_count"] == 1


def test_members_ordered_by_role(client, make_user, db_session):
    owner = make_user("own")
    member = make_user("mem")
    moderator = make_user("mod")
    group = _create_group(client, owner)
    client.post(f"/groups/{group['id']}/join", headers=member["headers"])
    db_session.add(GroupMembership(group_id=group["id"], user_id=moderator["id"], role="moderator"))
    db_session.commit()

    roles = [m["role"] for m in client.get(f"/groups/{group['id']}").json()["members"]]
    assert roles == ["admin", "moderator", "member"]


def test_user_groups(client, make_user):
    owner = make_user("own")
    group = _create_group(client, owner)
    groups = client.get(f"/users/{owner['id']}/groups").json()
    assert groups[0]["id"] == group["id"]
    assert groups[0]["role"] == "admin"
    assert client.get("/users/999999/groups").status_code == 404
