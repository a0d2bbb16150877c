import hmac

from flask import Blueprint, current_app, flash, redirect, render_template, request, session, url_for

bp = Blueprint('auth', __name__)


def _token_ok(token, cfg):
    expected = cfg.ADMIN_TOKEN or ''
    # An unset ADMIN_TOKEN locks everyone out rather than letting '' in.
    return bool(expected) and hmac.compare_digest(token.encode(), expected.encode())


@bp.route('/login', methods=['GET', 'POST'])
def login():
    if request.method == 'POST':
        cfg = current_app.daemon_config
        token = request.form.get('token', '').strip()
        if _token_ok(token, cfg):
            session['logged_in'] = True
            return redirect(url_for('console.console'))
        flash('Invalid token', 'error')
    return render_template('login.html')


@bp.route('/logout')
def logout():
    session.clear()
    return redirect(url_for('auth.login'))
