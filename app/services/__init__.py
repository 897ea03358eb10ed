"""
Grammable Services Package

- GramService: gram create/read/update/delete with ownership checks
- CommentService: comments on grams
- UserService: registration, lookup and authentication

Module-level instances are created lazily; their repositories resolve the
Kuzu database from the current Flask application on each call.
"""

from .gram_service import GramService
from .comment_service import CommentService
from .user_service import UserService

# Service instances with lazy initialization
_gram_service = None
_comment_service = None
_user_service = None


def _get_gram_service():
    """Get gram service instance with lazy initialization."""
    global _gram_service
    if _gram_service is None:
        _gram_service = GramService()
    return _gram_service


def _get_comment_service():
    """Get comment service instance with lazy initialization."""
    global _comment_service
    if _comment_service is None:
        _comment_service = CommentService()
    return _comment_service


def _get_user_service():
    """Get user service instance with lazy initialization."""
    global _user_service
    if _user_service is None:
        _user_service = UserService()
    return _user_service


class _LazyService:
    """Lazy service that initializes on first access."""
    def __init__(self, service_getter):
        self._service_getter = service_getter
        self._service = None

    def __getattr__(self, name):
        if self._service is None:
            self._service = self._service_getter()
        return getattr(self._service, name)


gram_service = _LazyService(_get_gram_service)
comment_service = _LazyService(_get_comment_service)
user_service = _LazyService(_get_user_service)


__all__ = [
    'GramService',
    'CommentService',
    'UserService',
    'gram_service',
    'comment_service',
    'user_service',
]
