from flask import Blueprint, current_app, jsonify

from ..decorators import login_required
from ..services.daemon import is_daemon_running

bp = Blueprint('api', __name__)


@bp.route('/healthz')
def healthz():
    return jsonify({'ok': True})


@bp.route('/api/status')
@login_required
def api_status():
    cfg = current_app.daemon_config
    renderer = current_app.console_renderer
    with current_app.console_lock:
        lines, total, capacity = len(renderer), renderer.total, renderer.capacity
    return jsonify({
        'running': is_daemon_running(cfg),
        'ready': bool(current_app.daemon_state.get('ready')),
        'lines': lines,
        'total': total,
        'capacity': capacity,
    })
