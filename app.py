from flask import Flask
from dotenv import load_dotenv

load_dotenv()

from config import Config  # noqa: E402  (load_dotenv needs to run first)
from extensions import db, login_manager  # noqa: E402  (load_dotenv needs to run first)


def create_app(config_overrides: dict | None = None) -> Flask:
    """Application factory for the printer maintenance tracker."""

    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    # init extensions
    db.init_app(app)
    login_manager.init_app(app)
    login_manager.login_view = "auth.login"
    login_manager.login_message_category = "warning"

    import permissions  # noqa: F401  (registers the user loader)

    # blueprints
    from modules.auth import bp as auth_bp
    from modules.printers import bp as printers_bp
    from modules.spare_parts import bp as spare_parts_bp
    from modules.changes import bp as changes_bp
    from modules.settings import bp as settings_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(printers_bp)
    app.register_blueprint(spare_parts_bp)
    app.register_blueprint(changes_bp)
    app.register_blueprint(settings_bp)

    from ui_routes import ui
    app.register_blueprint(ui)  # дашборд "/"

    # DB
    with app.app_context():
        # Важно: модели должны быть импортированы до create_all()
        import models  # noqa: F401
        from modules.printers import models as printers_models  # noqa: F401
        from modules.spare_parts import models as spare_parts_models  # noqa: F401
        from modules.changes import models as changes_models  # noqa: F401

        db.create_all()

    # --- форматирование в шаблонах Jinja ---
    from utils import format_date, format_datetime, format_number

    app.jinja_env.filters["date"] = format_date
    app.jinja_env.filters["datetime"] = format_datetime
    app.jinja_env.filters["number"] = format_number

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True)
