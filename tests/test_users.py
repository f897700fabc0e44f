"""Profile and favorite film tests."""

from sqlalchemy import text


def test_profile_hides_email_from_others(client, make_user):
    owner = make_user("prof")
    visitor = make_user("vis")
    own_view = client.get(f"/users/{owner['id']}/profile", headers=owner["headers"]).json()
    other_view = client.get(f"/users/{owner['id']}/profile", headers=visitor["headers"]).json()
    anonymous = client.get(f"/users/{owner['id']}/profile").json()
    assert own_view["email"] == owner["email"]
    assert other_view["email"] is None
    assert anonymous["email"] is None
    assert client.get("/users/999999/profile").status_code == 404


def test_update_profile(client, make_user):
    user = make_user("upd")
    taken = make_user("upd")
    r = client.put(
        "/users/me",
        json={"bio": "Film nerd", "genre_preferences": ["Drama", "Noir"]},
        headers=user["headers"],
    )
    assert r.status_code == 200
    assert r.json()["genre_preferences"] == ["Drama", "Noir"]
    assert client.put("/users/me", json={}, headers=user["headers"]).status_code == 400
    assert client.put("/users/me", json={"display_name": taken["display_name"]}, headers=user["headers"]).status_code == 409

    profile = client.get(f"/users/{user['id']}/profile").json()
    assert profile["bio"] == "Film nerd"


def test_profile_stats_and_recent_reviews(client, make_user, make_film):
    user = make_user("stat")
    for rating in (3, 4, 5, 2):
        client.post("/reviews", json={"film_id": make_film(), "rating": rating}, headers=user["headers"])
    client.post("/groups", json={"title": "Stats"}, headers=user["headers"])

    profile = client.get(f"/users/{user['id']}/profile").json()
    assert profile["stats"]["review_count"] == 4
    assert profile["stats"]["group_count"] == 1
    assert len(profile["recent_reviews"]) == 3
    assert profile["recent_reviews"][0]["rating"] == 2


def test_favorites_limit_and_positions(client, make_user, make_film):
    user = make_user("fav")
    films = [make_film() for _ in range(6)]
    for film_id in films[:5]:
        assert client.post(f"/users/me/favorites/{film_id}", headers=user["headers"]).status_code == 200
    assert client.post(f"/users/me/favorites/{films[5]}", headers=user["headers"]).status_code == 400
    assert client.post(f"/users/me/favorites/{films[0]}", headers=user["headers"]).status_code == 409
    assert client.post("/users/me/favorites/999999", headers=user["headers"]).status_code == 404

    remaining = client.delete(f"/users/me/favorites/{films[1]}", headers=user["headers"]).json()
    assert [f["film_id"] for f in remaining] == [films[0], films[2], films[3], films[4]]
    assert [f["position"] for f in remaining] == [0, 1, 2, 3]
    assert client.delete(f"/users/me/favorites/{films[1]}", headers=user["headers"]).status_code == 404

    profile = client.get(f"/users/{user['id']}/profile").json()
    assert len(profile["favorite_films"]) == 4


def test_unparsable_genre_list_reads_as_empty(client, make_user, db_session):
    user = make_user("json")
    db_session.execute(
        text("UPDATE users SET genre_preferences = :raw WHERE id = :id"),
        {"raw": "{not json", "id": user["id"]},
    )
    db_session.commit()
    assert client.get(f"/users/{user['id']}/profile").json()["genre_preferences"] == []

    db_session.execute(
        text("UPDATE users SET genre_preferences = :raw WHERE id = :id"),
        {"raw": '{"a": 1}', "id": user["id"]},
    )
    db_session.commit()
    assert client.get(f"/users/{user['id']}/profile").json()["genre_preferences"] == []
