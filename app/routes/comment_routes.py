"""Comment routes nested under a gram."""

import logging

from flask import Blueprint, redirect, url_for, flash
from flask_login import login_required, current_user

from app.forms import CommentForm
from app.services import comment_service

comments_bp = Blueprint('comments', __name__)

logger = logging.getLogger(__name__)


@comments_bp.route('/<gram_id>/comments', methods=['POST'])
@login_required
def create(gram_id: str):
    form = CommentForm()
    comment = comment_service.create_comment(
        current_user._get_current_object(),  # type: ignore[attr-defined]
        gram_id,
        form.message.data,
    )
    logger.debug("Comment %s added to gram %s", comment.id, gram_id)
    flash('Comment added.', 'success')
    return redirect(url_for('main.index'))
