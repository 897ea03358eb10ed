"""
Routes package initialization.
Registers all blueprint modules for the Grammable application.
"""

import logging
from flask import Blueprint

logger = logging.getLogger(__name__)

# Import all blueprint modules
from .gram_routes import grams_bp, index as grams_index
from .comment_routes import comments_bp

# Create a main blueprint that can be registered with the app
main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    """Root page: the gram feed."""
    return grams_index()


def register_blueprints(app):
    """Register all blueprints with the Flask application."""
    app.register_blueprint(main_bp)
    app.register_blueprint(grams_bp, url_prefix='/grams')
    # Comments are nested under /grams/<gram_id>/comments
    app.register_blueprint(comments_bp, url_prefix='/grams')
    logger.debug("All blueprints registered successfully")


__all__ = ['grams_bp', 'comments_bp', 'main_bp', 'register_blueprints']
