from flask import current_app, redirect, render_template, url_for
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import Novel
from ..notifications import notify_failure
from . import bp


@bp.route("/")
def index():
    if not current_user.is_authenticated:
        return redirect(url_for("auth.login"))

    try:
        novels = (
            Novel.query.filter_by(user_id=current_user.id)
            .order_by(Novel.updated_at.desc())
            .all()
        )
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("Failed to load novels for user %s", current_user.id)
        notify_failure("작품 불러오기 실패", exc)
        novels = []

    return render_template("main/novel_list.html", novels=novels)
