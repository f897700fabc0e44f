"""Content reporting and moderation tests."""


def _review(client, user, film_id, rating=2, comment="Overrated"):
    r = client.post("/reviews", json={"film_id": film_id, "rating": rating, "comment": comment}, headers=user["headers"])
    assert r.status_code == 200, r.text
    return r.json()


def _report(client, user, content_type, content_id, reason="Spam"):
    return client.post(
        "/moderation/report",
        json={"content_type": content_type, "content_id": content_id, "reason": reason},
        headers=user["headers"],
    )


def test_report_once_per_reporter(client, make_user, make_film):
    author = make_user("auth")
    reporter = make_user("rep")
    other = make_user("rep")
    review = _review(client, author, make_film())

    first = _report(client, reporter, "review", review["id"])
    assert first.status_code == 200
    assert first.json()["status"] == "pending"
    assert _report(client, reporter, "review", review["id"]).status_code == 409
    assert _report(client, other, "review", review["id"]).status_code == 200


def test_report_validates_content(client, make_user):
    reporter = make_user("rep")
    assert _report(client, reporter, "review", 999999).status_code == 404
    assert _report(client, reporter, "poster", 1).status_code == 422


def test_report_every_content_kind(client, make_user, make_film):
    author = make_user("auth")
    reporter = make_user("rep")
    review = _review(client, author, make_film())
    reply = client.post(f"/reviews/{review['id']}/replies", json={"message": "Nope"}, headers=author["headers"]).json()
    group = client.post("/groups", json={"title": "Reported"}, headers=author["headers"]).json()
    message = client.post(f"/groups/{group['id']}/messages", json={"message": "rude"}, headers=author["headers"]).json()

    for content_type, content_id in (
        ("comment_reply", reply["id"]),
        ("group_message", message["id"]),
        ("user", author["id"]),
    ):
        assert _report(client, reporter, content_type, content_id).status_code == 200


def test_moderation_is_admin_only(client, make_user):
    member = make_user("mem")
    assert client.get("/moderation/reports", headers=member["headers"]).status_code == 403
    r = client.post("/moderation/reports/1/action", json={"action": "warn"}, headers=member["headers"])
    assert r.status_code == 403


def test_delete_review_through_moderation(client, make_user, make_admin, make_film):
    author = make_user("auth")
    reporter = make_user("rep")
    admin = make_admin()
    film_id = make_film()
    review = _review(client, author, film_id, rating=1)
    report = _report(client, reporter, "review", review["id"]).json()

    queue = client.get("/moderation/reports", headers=admin["headers"]).json()
    entry = next(r for r in queue if r["id"] == report["id"])
    assert entry["content"]["author_name"] == author["display_name"]
    assert entry["content"]["rating"] == 1
    assert entry["reporter_name"] == reporter["display_name"]

    r = client.post(
        f"/moderation/reports/{report['id']}/action",
        json={"action": "delete", "notes": "Abusive"},
        headers=admin["headers"],
    )
    assert r.status_code == 200
    resolved = r.json()
    assert resolved["status"] == "resolved"
    assert resolved["moderator_id"] == admin["id"]
    assert resolved["moderator_action"] == "delete"
    assert resolved["moderator_notes"] == "Abusive"

    assert client.get(f"/reviews/{review['id']}").status_code == 404
    film = client.get(f"/movies/{film_id}").json()
    assert film["review_count"] == 0
    assert film["average_rating"] == 0.0

    # The queue still lists the report; its preview is gone
    resolved_queue = client.get("/moderation/reports", params={"status": "resolved"}, headers=admin["headers"]).json()
    entry = next(r for r in resolved_queue if r["id"] == report["id"])
    assert entry["content"] is None


def test_report_resolves_only_once(client, make_user, make_admin, make_film):
    author = make_user("auth")
    reporter = make_user("rep")
    admin = make_admin()
    review = _review(client, author, make_film())
    report = _report(client, reporter, "review", review["id"]).json()

    url = f"/moderation/reports/{report['id']}/action"
    assert client.post(url, json={"action": "warn"}, headers=admin["headers"]).status_code == 200
    r = client.post(url, json={"action": "no_action", "notes": "changed my mind"}, headers=admin["headers"])
    assert r.status_code == 409
    # Review untouched by a warn
    assert client.get(f"/reviews/{review['id']}").status_code == 200


def test_user_accounts_cannot_be_deleted(client, make_user, make_admin):
    target = make_user("tgt")
    reporter = make_user("rep")
    admin = make_admin()
    report = _report(client, reporter, "user", target["id"]).json()

    r = client.post(f"/moderation/reports/{report['id']}/action", json={"action": "delete"}, headers=admin["headers"])
    assert r.status_code == 400
    pending = client.get("/moderation/reports", headers=admin["headers"]).json()
    assert report["id"] in [p["id"] for p in pending]


def test_action_validation(client, make_admin):
    admin = make_admin()
    assert client.post("/moderation/reports/999999/action", json={"action": "warn"}, headers=admin["headers"]).status_code == 404
    assert client.post("/moderation/reports/999999/action", json={"action": "explode"}, headers=admin["headers"]).status_code == 422
