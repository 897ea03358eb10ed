"""
User Service

Handles user registration, lookup and password authentication.
"""

import logging
from typing import List, Optional

from ..domain.models import User
from ..domain.repositories import UserRepository
from ..infrastructure.kuzu_repositories import KuzuUserRepository

logger = logging.getLogger(__name__)


class UserService:
    """User service using the Kuzu user repository."""

    def __init__(self, user_repo: Optional[UserRepository] = None):
        self.user_repo = user_repo or KuzuUserRepository()

    def create_user(self, username: str, email: str, password: str) -> User:
        user = User(username=username.strip(), email=email.strip().lower())
        user.set_password(password)
        return self.user_repo.create(user)

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID (used by Flask-Login's user loader)."""
        if not user_id:
            return None
        return self.user_repo.get_by_id(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.user_repo.get_by_username(username)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.user_repo.get_by_email(email)

    def get_user_by_username_or_email(self, username_or_email: str) -> Optional[User]:
        """Look up by username first, then by email."""
        user = self.get_user_by_username(username_or_email)
        if user is None and '@' in username_or_email:
            user = self.get_user_by_email(username_or_email)
        return user

    def authenticate(self, username_or_email: str, password: str) -> Optional[User]:
        """Return the user when the credentials match, otherwise None."""
        user = self.get_user_by_username_or_email(username_or_email)
        if user is None:
            logger.info("Login failed: unknown user %r", username_or_email)
            return None
        if not user.is_active:
            logger.info("Login refused for inactive user %s", user.id)
            return None
        if not user.check_password(password):
            logger.info("Login failed: bad password for user %s", user.id)
            return None
        return user

    def list_users(self, limit: int = 100, offset: int = 0) -> List[User]:
        return self.user_repo.list_all(limit=limit, offset=offset)
