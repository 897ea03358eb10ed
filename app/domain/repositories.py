"""
Repository interfaces for the domain layer.

These interfaces define the contracts for data access without coupling to specific implementations.
Following the Repository pattern and Dependency Inversion Principle.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .models import User, Gram, Comment


class UserRepository(ABC):
    """Repository interface for User operations."""

    @abstractmethod
    def create(self, user: User) -> User:
        """Create a new user."""
        pass

    @abstractmethod
    def get_by_id(self, user_id: str) -> Optional[User]:
        """Get a user by ID."""
        pass

    @abstractmethod
    def get_by_username(self, username: str) -> Optional[User]:
        """Get a user by username."""
        pass

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email."""
        pass

    @abstractmethod
    def list_all(self, limit: int = 100, offset: int = 0) -> List[User]:
        """List users ordered by creation time."""
        pass


class GramRepository(ABC):
    """Repository interface for Gram operations."""

    @abstractmethod
    def create(self, gram: Gram) -> Gram:
        """Persist a new gram and link it to its owner."""
        pass

    @abstractmethod
    def get_by_id(self, gram_id: str) -> Optional[Gram]:
        """Get a gram by ID with its owner and comments loaded."""
        pass

    @abstractmethod
    def list_all(self) -> List[Gram]:
        """All grams, newest first."""
        pass

    @abstractmethod
    def latest(self) -> Optional[Gram]:
        """The most recently created gram."""
        pass

    @abstractmethod
    def update(self, gram: Gram) -> Gram:
        """Update an existing gram's message."""
        pass

    @abstractmethod
    def delete(self, gram_id: str) -> bool:
        """Delete a gram together with its comments."""
        pass

    @abstractmethod
    def count(self) -> int:
        pass


class CommentRepository(ABC):
    """Repository interface for Comment operations."""

    @abstractmethod
    def create(self, comment: Comment) -> Comment:
        """Persist a comment and link it to its gram and author."""
        pass

    @abstractmethod
    def list_for_gram(self, gram_id: str) -> List[Comment]:
        """Comments on a gram in creation order."""
        pass

    @abstractmethod
    def count(self) -> int:
        pass
