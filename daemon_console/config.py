import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'change-me-in-production')
    SESSION_COOKIE_HTTPONLY = True
    PERMANENT_SESSION_LIFETIME = 3600

    ADMIN_TOKEN      = os.environ.get('ADMIN_TOKEN', '')
    HOST             = os.environ.get('HOST', '0.0.0.0')
    PORT             = int(os.environ.get('PORT', '5000'))
    LOG_LEVEL        = os.environ.get('LOG_LEVEL', 'INFO')

    # Wrapped daemon
    DAEMON_CONTAINER = os.environ.get('DAEMON_CONTAINER', 'daemon')
    LOG_FILE         = os.environ.get('LOG_FILE') or None
    READY_MARKER     = os.environ.get('READY_MARKER', 'Listening on')

    # Console display
    CONSOLE_CAPACITY = int(os.environ.get('CONSOLE_CAPACITY', '5000'))
    DEFAULT_COLOR    = os.environ.get('DEFAULT_COLOR', '#94A3B8')
    MAX_PAGE_SIZE    = 1000

    EXPORT_DIR       = os.environ.get('EXPORT_DIR', os.path.join(os.getcwd(), 'exports'))
