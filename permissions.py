# permissions.py
"""
Session boundary for the application.

- Every dashboard view is wrapped in Flask-Login's ``login_required``;
  anonymous visitors are sent to ``auth.login``.
- ``anonymous_required`` does the opposite for the auth views: a signed-in
  user who opens the login page lands on the dashboard root.
- Row-level access (each user only sees their own rows) lives in
  ``store.RecordStore``, not here.
"""

from functools import wraps

from flask import redirect, url_for
from flask_login import current_user

from extensions import db, login_manager
from models import User


@login_manager.user_loader
def load_user(user_id: str | None) -> User | None:
    """Resolve a ``User`` instance for Flask-Login sessions."""

    if not user_id:
        return None
    return db.session.get(User, int(user_id))


def anonymous_required(view_func):
    """Send already authenticated users to the dashboard root."""

    @wraps(view_func)
    def wrapped(*args, **kwargs):
        if current_user.is_authenticated:
            return redirect(url_for("ui.home"))
        return view_func(*args, **kwargs)

    return wrapped
