"""
Flask application factory for Grammable.

Grams, comments and users live in an embedded Kuzu graph database; sessions
are server-side (Flask-Session) and authentication is handled by Flask-Login.
"""

import os
import atexit
import logging
from flask import Flask, request, jsonify, redirect, url_for, flash, render_template
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect
from flask_session import Session
from werkzeug.exceptions import HTTPException
from config import Config

from .domain.errors import GramAppError, NotAuthenticated

logger = logging.getLogger(__name__)

login_manager = LoginManager()
csrf = CSRFProtect()
sess = Session()

@login_manager.user_loader
def load_user(user_id):
    """Load user from Kuzu via the user service."""
    from .services import user_service
    try:
        return user_service.get_user_by_id(user_id)
    except Exception as e:
        logger.error(f"Error loading user {user_id}: {e}")
        return None

@login_manager.unauthorized_handler
def unauthorized():
    """Custom unauthorized handler that returns JSON for API requests."""
    if request.path.startswith('/api/'):
        return jsonify({
            'status': 'error',
            'message': 'Authentication required'
        }), 401

    # Redirect to the sign-in page, remembering where the user was headed
    flash(login_manager.login_message, login_manager.login_message_category)
    return redirect(url_for('auth.login', next=request.path))

def _wants_json() -> bool:
    return request.path.startswith('/api/') or request.is_json

def _render_error(status_code: int, message: str):
    if _wants_json():
        return jsonify({'status': 'error', 'message': message}), status_code
    return render_template('errors/error.html', status_code=status_code, message=message), status_code

def create_development_user(app):
    """Create development user from DEV_USER_USERNAME / DEV_USER_PASSWORD if specified."""
    dev_username = app.config.get('DEV_USER_USERNAME')
    dev_password = app.config.get('DEV_USER_PASSWORD')
    if not (dev_username and dev_password):
        logger.debug("No development user credentials provided")
        return False

    from .services import user_service
    if user_service.get_user_by_username(dev_username):
        logger.info(f"Development user {dev_username} already exists, skipping creation")
        return True

    user_service.create_user(
        username=dev_username,
        email=f"{dev_username}@localhost.dev",
        password=dev_password,
    )
    logger.info(f"Created development user: {dev_username}")
    return True

def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Configure Python logging level from LOG_LEVEL (default ERROR)
    log_level_name = str(app.config.get('LOG_LEVEL') or 'ERROR').upper()
    log_level = getattr(logging, log_level_name, logging.ERROR)
    logging.getLogger().setLevel(log_level)
    app.logger.setLevel(log_level)

    # Must be set before Flask-Session initialization
    app.secret_key = app.config['SECRET_KEY']
    if not app.secret_key:
        raise RuntimeError("SECRET_KEY must be set in environment or config")

    from .infrastructure.kuzu_graph import init_kuzu
    kuzu_db = init_kuzu(app)

    # Initialize extensions
    csrf.init_app(app)
    sess.init_app(app)
    login_manager.init_app(app)
    login_manager.login_view = 'auth.login'  # type: ignore
    login_manager.login_message = 'Please log in to access this page.'
    login_manager.login_message_category = 'info'

    @app.context_processor
    def inject_csrf_token():
        """Make CSRF token available in all templates."""
        from flask_wtf.csrf import generate_csrf
        return dict(csrf_token=generate_csrf)

    @app.context_processor
    def inject_site_name():
        """Make site name available in all templates."""
        return dict(site_name=app.config.get('SITE_NAME', 'Grammable'))

    # Domain errors raised by the services
    @app.errorhandler(NotAuthenticated)
    def handle_not_authenticated(e):
        return login_manager.unauthorized()

    @app.errorhandler(GramAppError)
    def handle_gram_error(e):
        return _render_error(e.status_code, e.message)

    @app.errorhandler(404)
    def handle_not_found(e):
        return _render_error(404, 'The page you were looking for does not exist.')

    @app.errorhandler(403)
    def handle_forbidden(e):
        return _render_error(403, 'You are not allowed to do that.')

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        if isinstance(e, HTTPException):
            return e
        app.logger.exception(f"Unhandled error on {request.method} {request.path}: {e}")
        return _render_error(500, 'Something went wrong.')

    # Register blueprints
    from .routes import register_blueprints
    from .auth import auth
    from .api.grams import grams_api
    register_blueprints(app)
    app.register_blueprint(auth, url_prefix='/auth')
    app.register_blueprint(grams_api)

    # HTML forms reach PATCH/DELETE routes through ?_method=
    from .utils.wsgi import method_override_wrapper, request_log_wrapper
    app.wsgi_app = method_override_wrapper(app.wsgi_app)  # type: ignore[method-assign]
    if os.getenv('GRAMMABLE_REQUEST_LOG', 'false').lower() == 'true':
        app.wsgi_app = request_log_wrapper(app.wsgi_app)  # type: ignore[method-assign]
        app.logger.info("WSGI request logger installed (GRAMMABLE_REQUEST_LOG=true)")

    with app.app_context():
        kuzu_db.connect()
        create_development_user(app)

    atexit.register(kuzu_db.disconnect)

    app.logger.info("Flask app factory completed; application is ready to serve.")
    return app
