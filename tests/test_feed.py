"""Feed tests."""


def _befriend(client, a, b):
    client.post(f"/friend-requests/{b['id']}", headers=a["headers"])
    client.post(f"/friend-requests/{a['id']}/accept", headers=b["headers"])


def test_friends_feed_shows_only_friends(client, make_user, make_film):
    viewer = make_user("feed")
    friend = make_user("feed")
    stranger = make_user("feed")
    _befriend(client, viewer, friend)
    film_id = make_film()

    by_friend = client.post(
        "/reviews", json={"film_id": film_id, "rating": 5, "comment": "Loved it"}, headers=friend["headers"]
    ).json()
    by_stranger = client.post(
        "/reviews", json={"film_id": film_id, "rating": 1, "comment": "Hated it"}, headers=stranger["headers"]
    ).json()

    feed = client.get("/feed", headers=viewer["headers"]).json()
    ids = [r["id"] for r in feed["reviews"]]
    assert by_friend["id"] in ids
    assert by_stranger["id"] not in ids

    global_ids = [r["id"] for r in client.get("/feed/global").json()["reviews"]]
    assert {by_friend["id"], by_stranger["id"]} <= set(global_ids)


def test_feed_without_friends(client, make_user):
    loner = make_user("lone")
    feed = client.get("/feed", headers=loner["headers"]).json()
    assert feed["reviews"] == []
    assert len(feed["recent_films"]) <= 5
    assert client.get("/feed").status_code == 401
