from flask import Blueprint

bp = Blueprint("generator", __name__, url_prefix="/generator")

from . import routes  # noqa: E402,F401
