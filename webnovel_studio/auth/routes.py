from flask import current_app, redirect, render_template, request, url_for
from flask_login import current_user, login_required, login_user, logout_user
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import User
from ..notifications import notify, notify_failure
from . import bp
from .forms import LoginForm, RegistrationForm


@bp.route("/register", methods=["GET", "POST"])
def register():
    if current_user.is_authenticated:
        return redirect(url_for("main.index"))

    form = RegistrationForm()
    if form.validate_on_submit():
        user = User(email=form.email.data.strip().lower())
        user.set_password(form.password.data)
        try:
            db.session.add(user)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.exception("Sign-up failed for %s", user.email)
            notify_failure("회원가입 실패", exc)
        else:
            login_user(user)
            notify("회원가입 성공!", "이제 웹소설을 만들 수 있습니다.")
            return redirect(url_for("main.index"))
    elif form.is_submitted():
        _notify_form_errors("회원가입 실패", form)

    return render_template("auth/register.html", form=form)


@bp.route("/login", methods=["GET", "POST"])
def login():
    if current_user.is_authenticated:
        return redirect(url_for("main.index"))

    form = LoginForm()
    if form.validate_on_submit():
        user = User.query.filter_by(email=form.email.data.strip().lower()).first()
        if user and user.check_password(form.password.data):
            login_user(user)
            notify("로그인 성공!")
            next_page = request.args.get("next")
            if not next_page or not next_page.startswith("/") or next_page.startswith("//"):
                next_page = url_for("main.index")
            return redirect(next_page)

        notify("로그인 실패", "이메일 또는 비밀번호가 올바르지 않습니다.", "danger")
    elif form.is_submitted():
        _notify_form_errors("로그인 실패", form)

    return render_template("auth/login.html", form=form)


@bp.route("/logout")
@login_required
def logout():
    logout_user()
    notify("로그아웃되었습니다", category="info")
    return redirect(url_for("auth.login"))


def _notify_form_errors(label: str, form) -> None:
    for errors in form.errors.values():
        for error in errors:
            notify(label, error, "danger")
