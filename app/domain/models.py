"""
Domain models for grams, comments and users.

These models represent the core business entities independent of persistence concerns.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, List, Dict


def now_utc() -> datetime:
    """Timezone-aware UTC now for default timestamps (avoid datetime.utcnow deprecation)."""
    return datetime.now(timezone.utc)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


@dataclass
class User:
    """User domain model."""
    id: Optional[str] = None
    username: str = ""
    email: str = ""
    password_hash: str = ""
    active: bool = True

    # System fields
    created_at: datetime = field(default_factory=now_utc)

    # Flask-Login compatibility
    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def is_active(self) -> bool:
        return self.active

    @property
    def is_anonymous(self) -> bool:
        return False

    def get_id(self) -> str:
        """Required by Flask-Login."""
        return self.id or ""

    def set_password(self, password: str):
        """Set password hash using werkzeug."""
        from werkzeug.security import generate_password_hash
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Check password using werkzeug."""
        from werkzeug.security import check_password_hash
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def __eq__(self, other):
        if not isinstance(other, User):
            return NotImplemented
        return self.id is not None and self.id == other.id

    def __hash__(self):
        return hash(self.id)


@dataclass
class Comment:
    """A message attached to a gram by a user."""
    id: Optional[str] = None
    message: str = ""
    gram_id: Optional[str] = None
    user_id: Optional[str] = None
    created_at: datetime = field(default_factory=now_utc)

    # Populated by the repository
    position: int = 0  # index among the gram's comments, in insertion order
    user: Optional[User] = None


@dataclass
class Gram:
    """A user-authored post with a text message."""
    id: Optional[str] = None
    message: str = ""
    user_id: Optional[str] = None
    created_at: datetime = field(default_factory=now_utc)
    updated_at: datetime = field(default_factory=now_utc)

    # Populated by the repository on reads
    user: Optional[User] = None
    comments: List[Comment] = field(default_factory=list)

    def validate(self) -> Dict[str, List[str]]:
        """Return validation errors keyed by field name; empty when the gram may be saved."""
        errors: Dict[str, List[str]] = {}
        if _is_blank(self.message):
            errors.setdefault('message', []).append("Message can't be blank")
        return errors

    def is_valid(self) -> bool:
        return not self.validate()

    @property
    def comment_count(self) -> int:
        return len(self.comments)
