"""
Gram Service

Create/read/update/delete for grams. Every identity-scoped operation takes the
acting user explicitly and checks, in order: authentication, existence,
ownership, validation. Nothing is written until all checks pass.
"""

import logging
from typing import Any, List, Optional

from ..domain.errors import NotFound, ValidationError
from ..domain.models import Gram
from ..domain.repositories import GramRepository
from ..infrastructure.kuzu_repositories import KuzuGramRepository
from ..utils.authorization import require_authenticated, require_owner

logger = logging.getLogger(__name__)


class GramService:
    """Gram operations on top of a ``GramRepository``."""

    def __init__(self, gram_repo: Optional[GramRepository] = None):
        self.gram_repo = gram_repo or KuzuGramRepository()

    def list_grams(self) -> List[Gram]:
        """All grams, newest first. No authentication required."""
        return self.gram_repo.list_all()

    def get_gram(self, gram_id: str) -> Gram:
        gram = self.gram_repo.get_by_id(gram_id)
        if gram is None:
            raise NotFound()
        return gram

    def latest_gram(self) -> Optional[Gram]:
        return self.gram_repo.latest()

    def count_grams(self) -> int:
        return self.gram_repo.count()

    def ensure_can_create(self, actor: Any) -> None:
        """Guard for showing the new-gram form."""
        require_authenticated(actor)

    def create_gram(self, actor: Any, message: Optional[str]) -> Gram:
        require_authenticated(actor)

        gram = Gram(message=(message or '').strip(), user_id=str(actor.id))
        errors = gram.validate()
        if errors:
            raise ValidationError(errors)

        gram = self.gram_repo.create(gram)
        gram.user = actor
        logger.info("User %s created gram %s", actor.id, gram.id)
        return gram

    def get_gram_for_edit(self, actor: Any, gram_id: str) -> Gram:
        require_authenticated(actor)
        gram = self.get_gram(gram_id)
        require_owner(actor, gram)
        return gram

    def update_gram(self, actor: Any, gram_id: str, message: Optional[str]) -> Gram:
        gram = self.get_gram_for_edit(actor, gram_id)

        # Validate a candidate so the loaded gram stays untouched on failure
        candidate = Gram(id=gram.id, message=(message or '').strip(), user_id=gram.user_id)
        errors = candidate.validate()
        if errors:
            raise ValidationError(errors)

        gram.message = candidate.message
        gram = self.gram_repo.update(gram)
        logger.info("User %s updated gram %s", actor.id, gram.id)
        return gram

    def destroy_gram(self, actor: Any, gram_id: str) -> None:
        gram = self.get_gram_for_edit(actor, gram_id)
        if not self.gram_repo.delete(gram.id):
            # Deleted by someone else between the lookup and now
            raise NotFound()
        logger.info("User %s deleted gram %s", actor.id, gram.id)
