"""Follow tests."""


def test_follow_and_unfollow(client, make_user):
    a = make_user("fol")
    b = make_user("fol")
    r = client.post(f"/users/{b['id']}/follow", headers=a["headers"])
    assert r.status_code == 200
    assert r.json()["following"] is True

    profile = client.get(f"/users/{b['id']}/profile", headers=a["headers"]).json()
    assert profile["is_following"] is True
    assert profile["stats"]["followers_count"] == 1

    # Following is one-way
    assert client.get(f"/users/{a['id']}/profile", headers=b["headers"]).json()["is_following"] is False

    r = client.delete(f"/users/{b['id']}/follow", headers=a["headers"])
    assert r.status_code == 200
    assert client.get(f"/users/{b['id']}/profile", headers=a["headers"]).json()["stats"]["followers_count"] == 0


def test_follow_guards(client, make_user):
    a = make_user("folg")
    b = make_user("folg")
    assert client.post(f"/users/{a['id']}/follow", headers=a["headers"]).status_code == 400
    assert client.post("/users/999999/follow", headers=a["headers"]).status_code == 404
    assert client.post(f"/users/{b['id']}/follow", headers=a["headers"]).status_code == 200
    assert client.post(f"/users/{b['id']}/follow", headers=a["headers"]).status_code == 409


def test_unfollow_when_not_following(client, make_user):
    a = make_user("unf")
    b = make_user("unf")
    assert client.delete(f"/users/{b['id']}/follow", headers=a["headers"]).status_code == 400
