"""
Playwright E2E conftest.

Starts a live Flask server on a random port in a background thread,
then tears it down after the session.

Usage:
    pytest -m e2e --headed   # see the browser
    pytest -m e2e            # headless
"""
import os
import shutil
import socket
import tempfile
import threading
import time

import pytest

ADMIN_TOKEN = 'e2e-secret-token'


def _make_e2e_config_class(export_dir):
    class E2EConfig:
        SECRET_KEY = 'e2e-key'
        SESSION_COOKIE_HTTPONLY = True
        PERMANENT_SESSION_LIFETIME = 3600
        ADMIN_TOKEN = 'e2e-secret-token'
        HOST = '127.0.0.1'
        PORT = 0
        LOG_LEVEL = 'INFO'
        DAEMON_CONTAINER = 'e2e-daemon'
        LOG_FILE = None
        READY_MARKER = 'Listening on'
        CONSOLE_CAPACITY = 50
        DEFAULT_COLOR = '#94A3B8'
        MAX_PAGE_SIZE = 1000
        EXPORT_DIR = export_dir

    return E2EConfig


@pytest.fixture(scope='session')
def live_app():
    """Session-scoped live Flask server for E2E tests."""
    export_dir = tempfile.mkdtemp(prefix='daemon_console_e2e_')
    os.environ['TESTING'] = '1'

    from daemon_console import create_app
    flask_app = create_app(config_class=_make_e2e_config_class(export_dir))
    flask_app.config['TESTING'] = True

    sock = socket.socket()
    sock.bind(('127.0.0.1', 0))
    port = sock.getsockname()[1]
    sock.close()

    server_thread = threading.Thread(
        target=lambda: flask_app.run(host='127.0.0.1', port=port, use_reloader=False),
        daemon=True,
    )
    server_thread.start()
    time.sleep(0.5)  # give server time to start

    yield flask_app, f'http://127.0.0.1:{port}'

    shutil.rmtree(export_dir, ignore_errors=True)


@pytest.fixture(scope='session')
def base_url(live_app):
    _, url = live_app
    return url


@pytest.fixture(scope='session')
def flask_app(live_app):
    app, _ = live_app
    return app


@pytest.fixture()
def admin_token():
    return ADMIN_TOKEN
