from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, render_template

from .config import Config
from .extensions import cors, csrf, db, login_manager, migrate
from .db_utils import ensure_database_schema
from .session import init_session_observer


BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")


def create_app(config_class: type[Config] = Config) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    register_extensions(app)
    register_blueprints(app)
    register_error_handlers(app)
    register_template_filters(app)
    init_session_observer(app)

    with app.app_context():
        ensure_database_schema()

    return app


def register_extensions(app: Flask) -> None:
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    login_manager.login_view = "auth.login"
    login_manager.login_message = "로그인이 필요합니다."
    login_manager.login_message_category = "info"
    csrf.init_app(app)
    cors.init_app(
        app,
        resources={r"/functions/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
        send_wildcard=True,
    )


def register_blueprints(app: Flask) -> None:
    from .auth import bp as auth_bp
    from .functions import bp as functions_bp
    from .generator import bp as generator_bp
    from .main import bp as main_bp
    from .novels import bp as novels_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(main_bp)
    app.register_blueprint(novels_bp)
    app.register_blueprint(generator_bp)
    app.register_blueprint(functions_bp)
    csrf.exempt(functions_bp)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(404)
    def not_found(_error):
        return render_template("errors/404.html"), 404


def register_template_filters(app: Flask) -> None:
    @app.template_filter("ko_date")
    def ko_date(value):
        # Matches the ko-KR short date, e.g. "2024. 1. 5."
        if value is None:
            return ""
        return f"{value.year}. {value.month}. {value.day}."
