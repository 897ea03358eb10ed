"""Gram routes: list, show, and owner-only create/edit/update/destroy.

Authentication is enforced first (``login_required``), then the service checks
existence and ownership; domain errors other than validation failures are
turned into responses by the handlers registered in ``create_app``.
"""

import logging

from flask import Blueprint, render_template, redirect, url_for, flash
from flask_login import login_required, current_user

from app.domain.errors import ValidationError
from app.forms import GramForm, CommentForm
from app.services import gram_service

grams_bp = Blueprint('grams', __name__)

logger = logging.getLogger(__name__)


def _actor():
    """The signed-in user (or Flask-Login's anonymous user) as a plain object."""
    return current_user._get_current_object()  # type: ignore[attr-defined]


def _add_form_errors(form: GramForm, error: ValidationError) -> None:
    for field_name, messages in error.errors.items():
        field = getattr(form, field_name, None)
        if field is not None:
            field.errors = list(field.errors) + messages


@grams_bp.route('', methods=['GET'])
def index():
    grams = gram_service.list_grams()
    return render_template('grams/index.html', grams=grams, comment_form=CommentForm())


@grams_bp.route('/new', methods=['GET'])
@login_required
def new():
    gram_service.ensure_can_create(_actor())
    return render_template('grams/new.html', form=GramForm())


@grams_bp.route('', methods=['POST'])
@login_required
def create():
    form = GramForm()
    if not form.validate_on_submit():
        return render_template('grams/new.html', form=form), 422
    try:
        gram = gram_service.create_gram(_actor(), form.message.data)
    except ValidationError as e:
        _add_form_errors(form, e)
        return render_template('grams/new.html', form=form), 422

    logger.debug("Created gram %s", gram.id)
    flash('Your gram has been posted.', 'success')
    return redirect(url_for('main.index'))


@grams_bp.route('/<gram_id>', methods=['GET'])
def show(gram_id: str):
    gram = gram_service.get_gram(gram_id)
    return render_template('grams/show.html', gram=gram, comment_form=CommentForm())


@grams_bp.route('/<gram_id>/edit', methods=['GET'])
@login_required
def edit(gram_id: str):
    gram = gram_service.get_gram_for_edit(_actor(), gram_id)
    form = GramForm(data={'message': gram.message})
    return render_template('grams/edit.html', gram=gram, form=form)


@grams_bp.route('/<gram_id>', methods=['PATCH', 'PUT'])
@login_required
def update(gram_id: str):
    # Existence and ownership come before validating the submitted message
    gram = gram_service.get_gram_for_edit(_actor(), gram_id)

    form = GramForm()
    if not form.validate_on_submit():
        return render_template('grams/edit.html', gram=gram, form=form), 422
    try:
        gram_service.update_gram(_actor(), gram_id, form.message.data)
    except ValidationError as e:
        _add_form_errors(form, e)
        return render_template('grams/edit.html', gram=gram, form=form), 422

    flash('Your gram has been updated.', 'success')
    return redirect(url_for('main.index'))


@grams_bp.route('/<gram_id>', methods=['DELETE'])
@login_required
def destroy(gram_id: str):
    gram_service.destroy_gram(_actor(), gram_id)
    flash('Your gram has been deleted.', 'success')
    return redirect(url_for('main.index'))
