import pytest
from flask_login import AnonymousUserMixin

from app.domain.errors import NotAuthenticated, NotFound
from app.services import comment_service


def test_create_comment_on_someone_elses_gram(app_ctx, gram_factory, user_factory):
    gram = gram_factory()
    commenter = user_factory()

    comment = comment_service.create_comment(commenter, gram.id, "awesome gram")

    assert comment.id
    assert comment.gram_id == gram.id
    assert comment.user_id == commenter.id
    assert comment_service.count_comments() == 1


def test_comments_for_gram_in_creation_order(app_ctx, gram_factory, user_factory):
    gram = gram_factory()
    user = user_factory()
    comment_service.create_comment(user, gram.id, "one")
    comment_service.create_comment(user, gram.id, "two")

    comments = comment_service.comments_for_gram(gram.id)

    assert [c.message for c in comments] == ["one", "two"]
    assert comments[0].user.username == user.username


def test_create_comment_requires_authentication(app_ctx, gram_factory):
    gram = gram_factory()

    with pytest.raises(NotAuthenticated):
        comment_service.create_comment(AnonymousUserMixin(), gram.id, "hi")

    assert comment_service.count_comments() == 0


def test_create_comment_authentication_checked_before_existence(app_ctx):
    with pytest.raises(NotAuthenticated):
        comment_service.create_comment(None, "YOLOGSWAG", "hi")


def test_create_comment_unknown_gram(app_ctx, user_factory):
    with pytest.raises(NotFound):
        comment_service.create_comment(user_factory(), "YOLOGSWAG", "hi")


def test_create_comment_accepts_empty_message(app_ctx, gram_factory, user_factory):
    gram = gram_factory()

    comment = comment_service.create_comment(user_factory(), gram.id, None)

    assert comment.message == ""
    assert len(comment_service.comments_for_gram(gram.id)) == 1


class _StaleGramRepository:
    """Hands back a gram that has since been deleted."""

    def __init__(self, gram):
        self.gram = gram

    def get_by_id(self, gram_id):
        return self.gram


def test_create_comment_for_unknown_author_stores_nothing(app_ctx, gram_factory):
    from app.domain.errors import StorageError
    from app.domain.models import User

    gram = gram_factory()
    ghost = User(id="ghost-id", username="ghost", email="ghost@example.com")

    with pytest.raises(StorageError):
        comment_service.create_comment(ghost, gram.id, "awesome gram")

    assert comment_service.count_comments() == 0


def test_create_comment_on_gram_deleted_after_lookup(app_ctx, gram_factory, user_factory):
    from app.services import CommentService, gram_service

    owner = user_factory()
    gram = gram_factory(user=owner)
    gram_service.destroy_gram(owner, gram.id)
    service = CommentService(gram_repo=_StaleGramRepository(gram))

    with pytest.raises(NotFound):
        service.create_comment(user_factory(), gram.id, "awesome gram")

    assert comment_service.count_comments() == 0


def test_comments_with_same_timestamp_keep_insertion_order(app_ctx, gram_factory, user_factory):
    from datetime import datetime, timezone

    from app.domain.models import Comment

    gram = gram_factory()
    user = user_factory()
    stamp = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    for message in ("first", "second", "third"):
        comment_service.comment_repo.create(
            Comment(message=message, gram_id=gram.id, user_id=user.id, created_at=stamp)
        )

    comments = comment_service.comments_for_gram(gram.id)

    assert [c.message for c in comments] == ["first", "second", "third"]
    assert [c.position for c in comments] == [0, 1, 2]
