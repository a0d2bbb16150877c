import codecs
import logging
import os
import threading
import time

from ..ansi import strip_sgr

log = logging.getLogger(__name__)


def feed_line(app, line):
    """Append one raw line to the console and watch it for the ready marker."""
    with app.console_lock:
        app.console_renderer.append(line)
    check_ready_marker(app, line)


def check_ready_marker(app, line):
    """Flip daemon_state['ready'] the first time READY_MARKER shows up."""
    marker = getattr(app.daemon_config, 'READY_MARKER', None)
    if not marker or app.daemon_state.get('ready'):
        return False
    if marker in strip_sgr(line):
        app.daemon_state['ready'] = True
        log.info('Daemon ready (matched %r)', marker)
        return True
    return False


def split_lines(pending):
    """Split buffered output into complete lines and the unfinished tail.

    ``\\r`` moves the cursor to the start of the line, so only the text after
    the last ``\\r`` is kept (what a real terminal would show).  Blank lines
    are dropped.  Escape sequences are left intact for the renderer.
    """
    lines = []
    while '\n' in pending:
        raw_line, pending = pending.split('\n', 1)
        raw_line = raw_line.rstrip('\r')
        if '\r' in raw_line:
            raw_line = raw_line.rsplit('\r', 1)[-1]
        line = raw_line.rstrip()
        if line:
            lines.append(line)
    # Discard overwritten partial-line data (\r without \n).  A trailing \r
    # may be the first half of a \r\n split across chunks, so keep it.
    _, sep, tail = pending.rpartition('\r')
    if sep and tail:
        pending = tail
    return lines, pending


def start_console_poller(app):
    """Start two daemon threads that feed the console from the wrapped daemon.

    1. Docker-log poller  - streams container logs via the Docker SDK.
    2. File poller        - tails LOG_FILE on disk, when configured.

    Both run concurrently.  Lines are appended through feed_line(), which
    takes app.console_lock, so the renderer only ever sees one writer.
    """
    cfg = app.daemon_config

    # ── 1. Docker-log poller ──────────────────────────────────────────────────
    def _docker_run():
        while True:
            client = None
            try:
                import docker
                client = docker.from_env()
                container = client.containers.get(cfg.DAEMON_CONTAINER)
                # With tty:true the stream carries raw PTY bytes that may
                # arrive a character at a time, splitting lines and even
                # multi-byte characters across chunks.
                pending = ''
                decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')
                for chunk in container.logs(
                    stream=True, follow=True, tail=200,
                    stdout=True, stderr=True,
                ):
                    lines, pending = split_lines(
                        pending + decoder.decode(chunk)
                    )
                    for line in lines:
                        feed_line(app, line)
            except Exception as exc:
                log.warning('Docker log poller error (retry in 5s): %s', exc)
            finally:
                if client:
                    try:
                        client.close()
                    except Exception as exc:
                        log.debug('Docker client close failed: %s', exc)
            time.sleep(5)

    # ── 2. File poller ────────────────────────────────────────────────────────
    def _file_run():
        log_file = getattr(cfg, 'LOG_FILE', None)
        if not log_file:
            return  # LOG_FILE not configured - nothing to tail
        last_pos = 0
        pending = ''
        while True:
            try:
                if not os.path.exists(log_file):
                    time.sleep(2)
                    continue
                # Truncated or rotated: start over
                if os.path.getsize(log_file) < last_pos:
                    last_pos, pending = 0, ''
                with open(log_file, 'r', encoding='utf-8', errors='replace', newline='') as f:
                    f.seek(last_pos)
                    lines, pending = split_lines(pending + f.read())
                    last_pos = f.tell()
                for line in lines:
                    feed_line(app, line)
            except Exception as exc:
                log.warning('File log poller error (retry in 0.5s): %s', exc)
                last_pos, pending = 0, ''
            time.sleep(0.5)

    threading.Thread(target=_docker_run, daemon=True, name='console-docker-poller').start()
    threading.Thread(target=_file_run,   daemon=True, name='console-file-poller').start()
