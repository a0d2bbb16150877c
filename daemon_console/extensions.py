import threading

from .ansi import DEFAULT_PALETTE
from .services.log_store import ConsoleRenderer


def init_console(app, cfg):
    """Attach the console renderer and its lock to *app*.

    The renderer is shared between the background pollers (writers) and the
    Flask routes (readers).  Every call into it goes through
    ``app.console_lock``; the renderer itself takes no locks.
    """
    app.console_renderer = ConsoleRenderer(
        cfg.CONSOLE_CAPACITY,
        palette=DEFAULT_PALETTE,
        default_color=cfg.DEFAULT_COLOR,
    )
    app.console_lock = threading.Lock()
    app.daemon_state = {'ready': False}
    return app.console_renderer
