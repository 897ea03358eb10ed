def test_list_grams(client, gram_factory):
    gram_factory(message="first")
    gram_factory(message="second")

    response = client.get("/api/v1/grams")

    assert response.status_code == 200
    body = response.get_json()
    assert body["status"] == "success"
    assert body["count"] == 2
    assert [g["message"] for g in body["data"]] == ["second", "first"]


def test_show_gram_includes_owner_and_comments(app, client, gram_factory, user_factory):
    from app.services import comment_service

    owner = user_factory(username="poster")
    gram = gram_factory(user=owner, message="hello")
    with app.app_context():
        comment_service.create_comment(user_factory(), gram.id, "nice")

    response = client.get(f"/api/v1/grams/{gram.id}")

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["id"] == gram.id
    assert data["user"] == {"id": owner.id, "username": "poster"}
    assert [c["message"] for c in data["comments"]] == ["nice"]
    assert data["created_at"]


def test_show_unknown_gram(client):
    response = client.get("/api/v1/grams/TACOCAT")

    assert response.status_code == 404
    assert response.get_json()["status"] == "error"
