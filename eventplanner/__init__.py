from flask import Flask

from eventplanner.config import Config
from eventplanner.database import csrf, db, login_manager

__version__ = '0.1.0'


def create_app(config_object=Config, overrides=None, store=None, sessions=None):
    """Build the application.

    ``store`` and ``sessions`` default to the SQLAlchemy-backed EventStore
    and the Flask-Login SessionProvider; views reach them only through
    ``app.extensions['eventplanner']``.
    """
    from eventplanner.session import SessionProvider, load_user
    from eventplanner.store import EventStore

    app = Flask(__name__)
    app.config.from_object(config_object)
    if overrides:
        app.config.update(overrides)

    # Module loggers (eventplanner.store, ...) propagate to app.logger
    app.logger.setLevel(str(app.config.get('LOG_LEVEL', 'INFO')).upper())

    db.init_app(app)
    login_manager.init_app(app)
    csrf.init_app(app)
    login_manager.user_loader(load_user)

    app.extensions['eventplanner'] = {
        'store': store or EventStore(),
        'sessions': sessions or SessionProvider(),
    }

    @app.template_filter('money')
    def money(value):
        return f"{app.config.get('CURRENCY_SYMBOL', '')}{float(value or 0):.2f}"

    with app.app_context():
        # Import models so that the table definitions are registered with SQLAlchemy
        from eventplanner import models  # noqa: F401
        from eventplanner.scripts.ensure_schema import ensure_schema
        ensure_schema()

    from eventplanner.routes import main as main_blueprint
    app.register_blueprint(main_blueprint)

    from eventplanner.api import api_bp
    # JSON clients send no form token
    csrf.exempt(api_bp)
    app.register_blueprint(api_bp)

    return app
