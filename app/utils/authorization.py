"""Authorization predicates for gram actions.

Services call these before touching storage; the acting user is always passed
in explicitly (Flask-Login's ``current_user`` from the request layer, or any
user object in tests and scripts).
"""

import logging
from typing import Any, Optional

from ..domain.errors import NotAuthenticated, Forbidden
from ..domain.models import Gram

logger = logging.getLogger(__name__)


def is_authenticated(actor: Optional[Any]) -> bool:
    """True for a signed-in user; False for None or Flask-Login's anonymous user."""
    if actor is None:
        return False
    return bool(getattr(actor, 'is_authenticated', False)) and bool(getattr(actor, 'id', None))


def is_owner(actor: Optional[Any], gram: Gram) -> bool:
    if not is_authenticated(actor):
        return False
    return gram.user_id is not None and str(actor.id) == str(gram.user_id)


def require_authenticated(actor: Optional[Any]) -> None:
    if not is_authenticated(actor):
        raise NotAuthenticated()


def require_owner(actor: Optional[Any], gram: Gram) -> None:
    """Raise ``Forbidden`` unless ``actor`` posted ``gram``."""
    if not is_owner(actor, gram):
        logger.warning(
            "Denied change to gram %s by user %s (owner %s)",
            gram.id, getattr(actor, 'id', None), gram.user_id,
        )
        raise Forbidden()
