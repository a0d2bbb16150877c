import logging
import os
from datetime import datetime

from flask import Blueprint, current_app, jsonify, redirect, render_template, request, url_for
from werkzeug.utils import secure_filename

from ..decorators import login_required
from ..services.export import save_logs_to_file

log = logging.getLogger(__name__)

bp = Blueprint('console', __name__)


def _int_arg(name, default):
    """Read an integer query parameter; None when it is not a number."""
    try:
        return int(request.args.get(name, default))
    except (TypeError, ValueError):
        return None


@bp.route('/')
@login_required
def index():
    return redirect(url_for('console.console'))


@bp.route('/console')
@login_required
def console():
    renderer = current_app.console_renderer
    with current_app.console_lock:
        rows = renderer.render_dicts()
        total = renderer.total
    return render_template('console.html', rows=rows, total=total, capacity=renderer.capacity)


@bp.route('/api/console/rows')
@login_required
def api_console_rows():
    since = _int_arg('since', 0)
    if since is None:
        return jsonify({'error': 'since must be an integer', 'status': 400}), 400
    with current_app.console_lock:
        rows, total = current_app.console_renderer.rows_since(since)
        start = current_app.console_renderer.buffer.start()
    # Every append scrolls the viewer to the bottom; only say so when there
    # is something new to show.
    return jsonify({
        'rows': rows, 'total': total, 'start': start,
        'scroll': 'bottom' if rows else None,
    })


@bp.route('/api/console/lines')
@login_required
def api_console_lines():
    since = _int_arg('since', 0)
    if since is None:
        return jsonify({'error': 'since must be an integer', 'status': 400}), 400
    with current_app.console_lock:
        lines, total = current_app.console_renderer.buffer.since(since)
    return jsonify({'lines': lines, 'total': total})


@bp.route('/api/console/logs')
@login_required
def api_console_logs():
    cfg = current_app.daemon_config
    page = _int_arg('page', 1)
    page_size = _int_arg('page_size', 100)
    if page is None or page_size is None or page < 1 or page_size < 1:
        return jsonify({'error': 'page and page_size must be positive integers', 'status': 400}), 400
    page_size = min(page_size, cfg.MAX_PAGE_SIZE)
    with current_app.console_lock:
        lines, total = current_app.console_renderer.buffer.page(page, page_size)
    return jsonify({'logs': lines, 'total': total, 'page': page, 'page_size': page_size})


@bp.route('/api/console/clear', methods=['POST'])
@login_required
def api_console_clear():
    with current_app.console_lock:
        current_app.console_renderer.clear()
        total = current_app.console_renderer.total
    return jsonify({'ok': True, 'total': total})


@bp.route('/api/console/export', methods=['POST'])
@login_required
def api_console_export():
    cfg = current_app.daemon_config
    data = request.get_json(silent=True) or {}
    name = secure_filename(str(data.get('path') or '')) or \
        f'console-{datetime.now().strftime("%Y%m%d-%H%M%S")}.log'
    path = os.path.join(cfg.EXPORT_DIR, name)
    try:
        with current_app.console_lock:
            count = save_logs_to_file(current_app.console_renderer, path, strip=bool(data.get('strip')))
    except OSError as exc:
        log.warning('Console export to %s failed: %s', path, exc)
        return jsonify({'ok': False, 'error': str(exc)}), 500
    return jsonify({'ok': True, 'path': path, 'lines': count})
