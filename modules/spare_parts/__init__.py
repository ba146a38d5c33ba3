"""Spare parts module package."""

from flask import Blueprint

bp = Blueprint("spare_parts", __name__, url_prefix="/spare-parts")

from . import models  # noqa: E402  pylint: disable=wrong-import-position
from . import routes  # noqa: E402  pylint: disable=wrong-import-position

__all__ = ["bp", "models", "routes"]
