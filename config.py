import os
import secrets
import platform
from cachelib.file import FileSystemCache
from dotenv import load_dotenv

# Load environment variables from .env file(s)
load_dotenv()

basedir = os.path.abspath(os.path.dirname(__file__))

def ensure_data_directory():
    """Ensure data directory exists with proper permissions (cross-platform)"""
    data_dir = os.environ.get('GRAMMABLE_DATA_DIR') or os.path.join(basedir, 'data')

    os.makedirs(data_dir, exist_ok=True)

    # Only set Unix permissions on non-Windows systems
    if platform.system() != "Windows":
        try:
            os.chmod(data_dir, 0o755)
        except (OSError, PermissionError):
            # Ignore permission errors (common on some mounted volumes)
            pass

    return data_dir

# Initialize data directory
data_dir = ensure_data_directory()

# Ensure Flask-Session directory exists
flask_sessions_dir = os.path.join(data_dir, 'flask_sessions')
os.makedirs(flask_sessions_dir, exist_ok=True)

class Config:
    # Expose data directory path for other modules
    DATA_DIR = data_dir
    # Security
    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        if os.environ.get('FLASK_ENV') == 'development' or os.environ.get('FLASK_DEBUG'):
            SECRET_KEY = secrets.token_hex(32)
            print("⚠️  WARNING: Using temporary SECRET_KEY for development. Set SECRET_KEY in .env for production!")
        else:
            # All Gunicorn workers must share one key or sessions break between workers.
            raise ValueError("No SECRET_KEY set for Flask application. Please set it in your .env file.")

    # CSRF Settings
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = 3600  # 1 hour
    WTF_CSRF_SSL_STRICT = False

    # Session cookies
    SESSION_COOKIE_SECURE = False  # Set to True only in production with HTTPS
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_PERMANENT = False
    PERMANENT_SESSION_LIFETIME = 86400  # 24 hours (when session.permanent = True)

    # Flask-Session Configuration (server-side sessions stored as files)
    SESSION_TYPE = os.environ.get('SESSION_TYPE', 'cachelib')
    SESSION_KEY_PREFIX = 'grammable:'
    SESSION_CACHELIB = FileSystemCache(cache_dir=flask_sessions_dir, threshold=500, mode=0o600)

    # Kuzu Database Configuration
    KUZU_DB_PATH = os.environ.get('KUZU_DB_PATH') or os.path.join(data_dir, 'kuzu', 'grammable.db')

    # Application settings
    SITE_NAME = os.environ.get('SITE_NAME', 'Grammable')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'ERROR').upper()

    # Remember cookie duration when "Remember Me" is checked
    REMEMBER_COOKIE_DURATION = 86400 * 7  # 7 days
    REMEMBER_COOKIE_SECURE = os.environ.get('FLASK_DEBUG', 'false').lower() == 'false'
    REMEMBER_COOKIE_HTTPONLY = True
    REMEMBER_COOKIE_SAMESITE = 'Lax'

    # Minimum password length for registration
    PASSWORD_MIN_LENGTH = int(os.environ.get('PASSWORD_MIN_LENGTH', 6))

    # Development account created at startup when both are set
    DEV_USER_USERNAME = os.environ.get('DEV_USER_USERNAME')
    DEV_USER_PASSWORD = os.environ.get('DEV_USER_PASSWORD')
