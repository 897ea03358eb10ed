"""
Gram API Endpoints

Read-only JSON views of the gram feed. Like the HTML index and show pages
they need no authentication.
"""

from flask import Blueprint, jsonify, current_app
import traceback

from ..domain.errors import NotFound
from ..services import gram_service

grams_api = Blueprint('grams_api', __name__, url_prefix='/api/v1/grams')


def _format_date(date_obj):
    if date_obj and hasattr(date_obj, 'isoformat'):
        return date_obj.isoformat()
    return None


def _serialize_user(user):
    if user is None:
        return None
    return {'id': user.id, 'username': user.username}


def serialize_comment(comment):
    return {
        'id': comment.id,
        'message': comment.message,
        'user': _serialize_user(comment.user),
        'created_at': _format_date(comment.created_at),
    }


def serialize_gram(gram):
    """Convert a domain gram to API response format."""
    return {
        'id': gram.id,
        'message': gram.message,
        'user': _serialize_user(gram.user),
        'created_at': _format_date(gram.created_at),
        'updated_at': _format_date(gram.updated_at),
        'comments': [serialize_comment(c) for c in gram.comments],
    }


@grams_api.route('', methods=['GET'])
def get_grams():
    """Get all grams, newest first."""
    try:
        grams_data = [serialize_gram(gram) for gram in gram_service.list_grams()]
        return jsonify({
            'status': 'success',
            'data': grams_data,
            'count': len(grams_data)
        }), 200

    except Exception as e:
        current_app.logger.error(f"Error getting grams: {e}")
        current_app.logger.error(traceback.format_exc())
        return jsonify({
            'status': 'error',
            'message': 'Failed to retrieve grams'
        }), 500


@grams_api.route('/<gram_id>', methods=['GET'])
def get_gram(gram_id):
    """Get a specific gram by ID."""
    try:
        gram = gram_service.get_gram(gram_id)
    except NotFound as e:
        return jsonify({
            'status': 'error',
            'message': e.message
        }), 404

    return jsonify({
        'status': 'success',
        'data': serialize_gram(gram)
    }), 200
