#!/usr/bin/env python3
"""
Daemon Console
Live, colour-preserving web view of a wrapped daemon's terminal output.
"""

import logging
import os

from daemon_console import create_app

logging.basicConfig(
    level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

app = create_app()


if __name__ == '__main__':
    cfg = app.daemon_config
    print("=" * 50)
    print("Daemon Console")
    print("=" * 50)
    print(f"Container:        {cfg.DAEMON_CONTAINER}")
    print(f"Log file:         {cfg.LOG_FILE or '-'}")
    print(f"Console capacity: {cfg.CONSOLE_CAPACITY} lines")
    print(f"Access:           http://{cfg.HOST}:{cfg.PORT}")
    print("=" * 50)

    app.run(host=cfg.HOST, port=cfg.PORT, debug=False)
