# tests/conftest.py
import os
import sys
from types import SimpleNamespace

import pytest

# чтобы import create_app работал при запуске из корня
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from app import create_app
from extensions import db
from models import User


@pytest.fixture()
def app():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "SECRET_KEY": "test-secret",
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


def _make_user(app, username: str) -> SimpleNamespace:
    with app.app_context():
        user = User(username=username)
        user.set_password("secret")
        db.session.add(user)
        db.session.commit()
        return SimpleNamespace(id=user.id, username=username)


@pytest.fixture()
def user(app):
    return _make_user(app, "maria")


@pytest.fixture()
def other_user(app):
    return _make_user(app, "jorge")
