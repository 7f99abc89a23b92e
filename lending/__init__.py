import logging

from flask import Flask
from config import Config
from lending.extensions import db, bcrypt, login_manager, migrate, mail, csrf
from lending.filters import register_filters


def configure_logging(app):
    """Aplica o nível de log configurado ao logger da aplicação."""
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    app.logger.setLevel(level)
    if not app.debug and not app.testing and not app.logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s [%(name)s] %(message)s'))
        app.logger.addHandler(handler)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app)

    # Inicialize as extensões
    db.init_app(app)
    bcrypt.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)
    mail.init_app(app)
    csrf.init_app(app)

    # Modelos precisam estar registrados antes do create_all/migrate
    from lending import models  # noqa: F401

    register_filters(app)

    # Registre os blueprints
    from lending.routes.auth import auth as auth_blueprint
    app.register_blueprint(auth_blueprint)

    from lending.routes.main import main as main_blueprint
    app.register_blueprint(main_blueprint)

    from lending.routes.admin import admin as admin_blueprint
    app.register_blueprint(admin_blueprint, url_prefix='/admin')

    return app
