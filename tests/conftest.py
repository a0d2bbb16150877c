"""
Shared pytest fixtures.

Key design decisions:
- TestConfig class with every setting pinned (avoids class-level os.environ.get timing issues).
- TESTING env var prevents the background console pollers from starting.
- Docker SDK is patched so no daemon is needed.
- A fresh app per test, so console buffers never leak between tests.
"""
import os
from unittest.mock import MagicMock, patch

import pytest


ADMIN_TOKEN = 'test-secret-token'


def _make_test_config_class(export_dir, capacity=5):
    _token = ADMIN_TOKEN
    _capacity = capacity

    class TestConfig:
        SECRET_KEY = 'pytest-secret'
        SESSION_COOKIE_HTTPONLY = True
        PERMANENT_SESSION_LIFETIME = 3600

        ADMIN_TOKEN = _token
        HOST = '127.0.0.1'
        PORT = 5000
        LOG_LEVEL = 'DEBUG'

        DAEMON_CONTAINER = 'test-daemon'
        LOG_FILE = None
        READY_MARKER = 'Listening on'

        CONSOLE_CAPACITY = _capacity
        DEFAULT_COLOR = '#94A3B8'
        MAX_PAGE_SIZE = 1000

        EXPORT_DIR = export_dir

    return TestConfig


def _make_mock_docker():
    """Return a pre-configured docker.from_env() mock."""
    container = MagicMock()
    container.status = 'running'
    container.logs.return_value = iter([b'\x1b[32m[daemon] starting\x1b[0m\n', b'Listening on 3001\n'])
    client = MagicMock()
    client.containers.get.return_value = container
    return client, container


@pytest.fixture()
def admin_token():
    return ADMIN_TOKEN


@pytest.fixture()
def export_dir(tmp_path):
    return str(tmp_path / 'exports')


@pytest.fixture()
def make_app(export_dir):
    """Factory for Flask test applications with a chosen console capacity.

    Background pollers are suppressed via TESTING env var.
    """
    os.environ['TESTING'] = '1'

    def _make(capacity=5, **overrides):
        TestConfig = _make_test_config_class(export_dir, capacity)
        for key, value in overrides.items():
            setattr(TestConfig, key, value)
        from daemon_console import create_app
        flask_app = create_app(config_class=TestConfig)
        flask_app.config['TESTING'] = True
        return flask_app

    return _make


@pytest.fixture()
def app(make_app):
    return make_app()


@pytest.fixture()
def client(app):
    """Flask test client (unauthenticated)."""
    return app.test_client()


@pytest.fixture()
def auth_client(app):
    """Flask test client pre-authenticated."""
    c = app.test_client()
    with c.session_transaction() as sess:
        sess['logged_in'] = True
    return c


@pytest.fixture()
def mock_docker():
    """Patch docker.from_env for a single test, returns (client_mock, container_mock)."""
    client, container = _make_mock_docker()
    with patch('docker.from_env', return_value=client):
        yield client, container


@pytest.fixture(autouse=True)
def _clear_daemon_status_cache():
    from daemon_console.services.daemon import clear_status_cache
    clear_status_cache()
    yield
    clear_status_cache()
