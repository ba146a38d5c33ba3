"""Login and logout."""

from flask import current_app, flash, redirect, render_template, request, url_for
from flask_login import login_required, login_user

from models import User
from permissions import anonymous_required
from store import RecordStore

from . import bp


@bp.route('/login', methods=['GET', 'POST'])
@anonymous_required
def login():
    if request.method == 'POST':
        username = (request.form.get('username') or '').strip()
        password = request.form.get('password') or ''
        user = User.query.filter_by(username=username).first()
        if user and user.check_password(password):
            login_user(user)
            current_app.logger.info("User %s signed in", username)
            next_url = request.args.get('next')
            if next_url and next_url.startswith('/') and not next_url.startswith('//'):
                return redirect(next_url)
            return redirect(url_for('ui.home'))
        flash('Invalid username or password', 'danger')
    return render_template('auth/login.html')


@bp.route('/logout')
@login_required
def logout():
    RecordStore.for_request().sign_out()
    return redirect(url_for('auth.login'))
