"""
Comment Service

Any signed-in user may comment on any existing gram.
"""

import logging
from typing import Any, List, Optional

from ..domain.errors import NotFound
from ..domain.models import Comment
from ..domain.repositories import CommentRepository, GramRepository
from ..infrastructure.kuzu_repositories import KuzuCommentRepository, KuzuGramRepository
from ..utils.authorization import require_authenticated

logger = logging.getLogger(__name__)


class CommentService:

    def __init__(self, comment_repo: Optional[CommentRepository] = None,
                 gram_repo: Optional[GramRepository] = None):
        self.comment_repo = comment_repo or KuzuCommentRepository()
        self.gram_repo = gram_repo or KuzuGramRepository(comment_repo=self.comment_repo)

    def create_comment(self, actor: Any, gram_id: str, message: Optional[str]) -> Comment:
        require_authenticated(actor)

        gram = self.gram_repo.get_by_id(gram_id)
        if gram is None:
            raise NotFound()

        comment = Comment(
            message='' if message is None else str(message),
            gram_id=gram.id,
            user_id=str(actor.id),
        )
        comment = self.comment_repo.create(comment)
        comment.user = actor
        logger.info("User %s commented on gram %s", actor.id, gram.id)
        return comment

    def comments_for_gram(self, gram_id: str) -> List[Comment]:
        return self.comment_repo.list_for_gram(gram_id)

    def count_comments(self) -> int:
        return self.comment_repo.count()
