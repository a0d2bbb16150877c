import logging
import time

log = logging.getLogger(__name__)

# Cache container status for 5 seconds to reduce Docker SDK connections
_status_cache: dict = {}
_STATUS_CACHE_TTL = 5


def is_daemon_running(cfg):
    """Return True if the daemon's Docker container is running.

    Caches the result for _STATUS_CACHE_TTL seconds so that several console
    pages polling /api/status do not each open a Docker connection.
    """
    cache_key = cfg.DAEMON_CONTAINER
    cached = _status_cache.get(cache_key)
    if cached and (time.monotonic() - cached['ts']) < _STATUS_CACHE_TTL:
        return cached['running']

    import docker
    client = None
    try:
        client = docker.from_env()
        container = client.containers.get(cfg.DAEMON_CONTAINER)
        running = container.status == 'running'
    except Exception as exc:
        log.debug('Daemon status check failed: %s', exc)
        running = False
    finally:
        if client:
            client.close()
    _status_cache[cache_key] = {'running': running, 'ts': time.monotonic()}
    return running


def clear_status_cache():
    _status_cache.clear()
