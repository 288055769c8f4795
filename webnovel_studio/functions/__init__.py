from flask import Blueprint

bp = Blueprint("functions", __name__, url_prefix="/functions/v1")

from . import routes  # noqa: E402,F401
