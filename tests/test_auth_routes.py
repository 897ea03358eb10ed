from app.services import user_service

from conftest import DEFAULT_PASSWORD, redirect_path


def test_login_page_renders(client):
    response = client.get("/auth/login")

    assert response.status_code == 200


def test_login_with_username_redirects_home(client, user_factory):
    user = user_factory()

    response = client.post(
        "/auth/login", data={"username": user.username, "password": DEFAULT_PASSWORD}
    )

    assert response.status_code == 302
    assert redirect_path(response) == "/"
    assert client.get("/grams/new").status_code == 200


def test_login_with_email(client, user_factory):
    user = user_factory()

    response = client.post(
        "/auth/login", data={"username": user.email, "password": DEFAULT_PASSWORD}
    )

    assert response.status_code == 302


def test_login_follows_next(client, user_factory):
    user = user_factory()

    response = client.post(
        "/auth/login?next=/grams/new",
        data={"username": user.username, "password": DEFAULT_PASSWORD},
    )

    assert redirect_path(response) == "/grams/new"


def test_login_ignores_offsite_next(client, user_factory):
    user = user_factory()

    response = client.post(
        "/auth/login?next=//evil.example.com/",
        data={"username": user.username, "password": DEFAULT_PASSWORD},
    )

    assert redirect_path(response) == "/"


def test_login_with_bad_password(client, user_factory):
    user = user_factory()

    response = client.post(
        "/auth/login", data={"username": user.username, "password": "nope"}
    )

    assert response.status_code == 200
    assert b"Invalid username/email or password" in response.data
    assert redirect_path(client.get("/grams/new")) == "/auth/login"


def test_logout(client, user_factory, login):
    login(user_factory())

    response = client.get("/auth/logout")

    assert response.status_code == 302
    assert redirect_path(client.get("/grams/new")) == "/auth/login"


def test_register_creates_user_and_signs_in(app, client):
    response = client.post(
        "/auth/register",
        data={
            "username": "newbie",
            "email": "newbie@example.com",
            "password": "secret123",
            "password2": "secret123",
        },
    )

    assert response.status_code == 302
    assert redirect_path(response) == "/"
    with app.app_context():
        assert user_service.get_user_by_username("newbie") is not None
    assert client.get("/grams/new").status_code == 200


def test_register_rejects_taken_username(app, client, user_factory):
    user_factory(username="taken")

    response = client.post(
        "/auth/register",
        data={
            "username": "taken",
            "email": "other@example.com",
            "password": "secret123",
            "password2": "secret123",
        },
    )

    assert response.status_code == 200
    assert b"Please use a different username." in response.data


def test_register_rejects_short_password(app, client):
    response = client.post(
        "/auth/register",
        data={
            "username": "shorty",
            "email": "shorty@example.com",
            "password": "abc",
            "password2": "abc",
        },
    )

    assert response.status_code == 200
    with app.app_context():
        assert user_service.get_user_by_username("shorty") is None


def test_unauthorized_api_request_gets_json_401(app):
    from app import login_manager

    with app.test_request_context("/api/v1/grams"):
        response, status = login_manager.unauthorized()

    assert status == 401
    assert response.get_json()["status"] == "error"


def test_unauthorized_page_request_redirects_to_sign_in(app):
    from app import login_manager

    with app.test_request_context("/grams/new"):
        response = login_manager.unauthorized()

    assert response.status_code == 302
    assert redirect_path(response) == "/auth/login"
