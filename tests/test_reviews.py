"""Review, like and reply tests."""

from sqlalchemy import func, select

from cineconnect.models.review import Review


def test_resubmitting_updates_single_review(client, make_user, make_film, db_session):
    user = make_user("rev")
    film_id = make_film()
    first = client.post("/reviews", json={"film_id": film_id, "rating": 2, "comment": "Meh"}, headers=user["headers"])
    second = client.post("/reviews", json={"film_id": film_id, "rating": 5, "comment": "Grew on me"}, headers=user["headers"])
    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json()["id"] == second.json()["id"]

    count = db_session.scalar(
        select(func.count(Review.id)).where(Review.user_id == user["id"], Review.film_id == film_id)
    )
    assert count == 1
    review = client.get(f"/reviews/{second.json()['id']}").json()
    assert review["rating"] == 5
    assert review["comment"] == "Grew on me"


def test_average_reflects_current_reviews(client, make_user, make_film):
    film_id = make_film()
    a = make_user("avg")
    b = make_user("avg")
    client.post("/reviews", json={"film_id": film_id, "rating": 5}, headers=a["headers"])
    client.post("/reviews", json={"film_id": film_id, "rating": 3}, headers=b["headers"])
    film = client.get(f"/movies/{film_id}").json()
    assert film["average_rating"] == 4.0
    assert film["review_count"] == 2

    client.post("/reviews", json={"film_id": film_id, "rating": 1}, headers=b["headers"])
    film = client.get(f"/movies/{film_id}").json()
    assert film["average_rating"] == 3.0
    assert film["review_count"] == 2


def test_review_by_tmdb_id_imports_film(client, make_user):
    user = make_user("tmdb")
    r = client.post("/reviews", json={"tmdb_id": 27205, "rating": 4}, headers=user["headers"])
    assert r.status_code == 200
    film = client.get(f"/movies/{r.json()['film_id']}").json()
    assert film["title"] == "Inception"
    assert film["tmdb_id"] == 27205


def test_review_validation(client, make_user, make_film):
    user = make_user("val")
    film_id = make_film()
    assert client.post("/reviews", json={"film_id": film_id, "rating": 6}, headers=user["headers"]).status_code == 422
    assert client.post("/reviews", json={"rating": 3}, headers=user["headers"]).status_code == 422
    assert client.post("/reviews", json={"film_id": 999999, "rating": 3}, headers=user["headers"]).status_code == 404
    assert client.post("/reviews", json={"tmdb_id": 1, "rating": 3}, headers=user["headers"]).status_code == 404


def test_my_and_recent_reviews(client, make_user, make_film):
    user = make_user("mine")
    film_id = make_film()
    review = client.post(
        "/reviews", json={"film_id": film_id, "rating": 4, "comment": "Sharp"}, headers=user["headers"]
    ).json()
    mine = client.get("/reviews/my", headers=user["headers"]).json()
    assert [r["id"] for r in mine] == [review["id"]]
    assert mine[0]["author"]["id"] == user["id"]
    assert review["id"] in [r["id"] for r in client.get("/reviews/recent").json()]


def test_toggle_like(client, make_user, make_film):
    author = make_user("lk")
    fan = make_user("lk")
    review = client.post("/reviews", json={"film_id": make_film(), "rating": 4}, headers=author["headers"]).json()

    r = client.post(f"/reviews/{review['id']}/like", headers=fan["headers"])
    assert r.json() == {"liked": True, "likes_count": 1}
    assert client.get(f"/reviews/{review['id']}/like-status", headers=fan["headers"]).json()["liked"] is True
    assert client.get(f"/reviews/{review['id']}/like-status").json() == {"liked": False, "likes_count": 1}

    r = client.post(f"/reviews/{review['id']}/like", headers=fan["headers"])
    assert r.json() == {"liked": False, "likes_count": 0}
    assert client.post("/reviews/999999/like", headers=fan["headers"]).status_code == 404


def test_replies(client, make_user, make_admin, make_film):
    author = make_user("rp")
    replier = make_user("rp")
    stranger = make_user("rp")
    admin = make_admin()
    review = client.post("/reviews", json={"film_id": make_film(), "rating": 4}, headers=author["headers"]).json()

    assert client.post(f"/reviews/{review['id']}/replies", json={"message": "  "}, headers=replier["headers"]).status_code == 400
    first = client.post(f"/reviews/{review['id']}/replies", json={"message": "Agreed"}, headers=replier["headers"]).json()
    second = client.post(f"/reviews/{review['id']}/replies", json={"message": "Not me"}, headers=stranger["headers"]).json()
    replies = client.get(f"/reviews/{review['id']}/replies").json()
    assert [r["id"] for r in replies] == [first["id"], second["id"]]
    assert replies[0]["author"]["display_name"] == replier["display_name"]

    assert client.delete(f"/replies/{first['id']}", headers=stranger["headers"]).status_code == 403
    assert client.delete(f"/replies/{first['id']}", headers=replier["headers"]).status_code == 200
    # Site admins may delete any reply
    assert client.delete(f"/replies/{second['id']}", headers=admin["headers"]).status_code == 200
    assert client.get(f"/reviews/{review['id']}/replies").json() == []
