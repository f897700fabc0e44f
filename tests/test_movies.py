"""Film catalog tests."""


def test_latest_imports_catalog(client):
    films = client.get("/movies/latest").json()
    tmdb_ids = {f["tmdb_id"] for f in films}
    assert {550, 278, 155} <= tmdb_ids
    fight_club = next(f for f in films if f["tmdb_id"] == 550)
    assert fight_club["genres"] == ["Drama", "Thriller"]
    assert "Brad Pitt" in fight_club["cast"]
    # Idempotent import
    assert len(client.get("/movies/latest").json()) == len(films)


def test_search_is_case_insensitive(client):
    results = client.get("/movies/search", params={"q": "godFATHER"}).json()
    assert any(f["title"] == "The Godfather" for f in results)
    assert client.get("/movies/search", params={"q": "zzzz-no-such-film"}).json() == []
    assert client.get("/movies/search", params={"q": ""}).status_code == 422


def test_search_matches_original_title(client):
    results = client.get("/movies/search", params={"q": "nuovo cinema"}).json()
    assert [f["tmdb_id"] for f in results] == [11216]


def test_details_by_tmdb_id_with_reviews(client, make_user):
    user = make_user("det")
    fan = make_user("det")
    review = client.post(
        "/reviews", json={"tmdb_id": 129, "rating": 5, "comment": "Magic"}, headers=user["headers"]
    ).json()
    client.post(f"/reviews/{review['id']}/like", headers=fan["headers"])
    client.post(f"/reviews/{review['id']}/replies", json={"message": "So true"}, headers=fan["headers"])

    details = client.get(f"/movies/{review['film_id']}").json()
    assert details["title"] == "Spirited Away"
    entry = next(r for r in details["reviews"] if r["id"] == review["id"])
    assert entry["likes_count"] == 1
    assert entry["author"]["id"] == user["id"]
    assert [r["message"] for r in entry["replies"]] == ["So true"]


def test_unknown_film(client):
    assert client.get("/movies/424242424").status_code == 404
