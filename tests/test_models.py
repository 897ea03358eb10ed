from app.domain.errors import NotFound, ValidationError
from app.domain.models import Comment, Gram, User


def test_gram_with_message_is_valid():
    gram = Gram(message="Hello!")

    assert gram.validate() == {}
    assert gram.is_valid()


def test_blank_gram_message_is_invalid():
    for message in ("", "   ", None):
        gram = Gram(message=message)
        assert gram.validate() == {"message": ["Message can't be blank"]}
        assert not gram.is_valid()


def test_comment_count():
    gram = Gram(message="hi", comments=[Comment(message="a"), Comment(message="b")])

    assert gram.comment_count == 2


def test_timestamps_are_timezone_aware():
    gram = Gram(message="hi")

    assert gram.created_at.tzinfo is not None
    assert gram.updated_at.tzinfo is not None


def test_user_password_hashing():
    user = User(username="alice")
    user.set_password("s3cret!")

    assert user.password_hash != "s3cret!"
    assert user.check_password("s3cret!")
    assert not user.check_password("wrong")


def test_user_without_password_never_matches():
    assert not User(username="alice").check_password("")


def test_user_flask_login_interface():
    user = User(id="abc", username="alice")

    assert user.is_authenticated
    assert user.is_active
    assert not user.is_anonymous
    assert user.get_id() == "abc"
    assert not User(id="abc", active=False).is_active


def test_users_compare_by_id():
    assert User(id="abc", username="a") == User(id="abc", username="b")
    assert User(id="abc") != User(id="xyz")
    assert User() != User()


def test_validation_error_messages():
    error = ValidationError({"message": ["Message can't be blank"]})

    assert error.status_code == 422
    assert error.full_messages() == ["Message can't be blank"]


def test_not_found_defaults():
    error = NotFound()

    assert error.status_code == 404
    assert error.message


def test_storage_error_is_a_server_error():
    from app.domain.errors import StorageError

    assert StorageError().status_code == 500
