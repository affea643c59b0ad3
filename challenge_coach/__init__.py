import logging
import os
from logging.handlers import RotatingFileHandler

from flask import Flask, jsonify
from flask_cors import CORS

from challenge_coach.config import config, engine_options
from challenge_coach.extensions import db, ma, jwt, migrate, socketio, limiter
from challenge_coach.errors import register_error_handlers


def configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    app.logger.setLevel(level)

    log_file = app.config.get('LOG_FILE')
    if log_file and not app.testing:
        os.makedirs(os.path.dirname(log_file) or '.', exist_ok=True)
        handler = RotatingFileHandler(log_file, maxBytes=1024 * 1024, backupCount=5)
        handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s [%(name)s] %(message)s'
        ))
        handler.setLevel(level)
        app.logger.addHandler(handler)


def create_app(config_name=None, **overrides):
    app = Flask(__name__)

    # Settings
    config_name = config_name or os.getenv('FLASK_CONFIG', 'default')
    app.config.from_object(config[config_name])
    app.config.update(overrides)
    app.config.setdefault('SQLALCHEMY_ENGINE_OPTIONS', engine_options(app.config))
    configure_logging(app)

    # Extensions
    db.init_app(app)
    ma.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    CORS(app, resources={r"/api/*": {"origins": app.config['CORS_ORIGINS']}})
    socketio.init_app(
        app,
        async_mode=app.config['SOCKETIO_ASYNC_MODE'],
        cors_allowed_origins=app.config['CORS_ORIGINS'],
    )

    register_error_handlers(app)

    # Blueprints
    from challenge_coach.routes.auth import auth_bp
    from challenge_coach.routes.users import user_bp
    from challenge_coach.routes.challenges import challenge_bp
    from challenge_coach.routes.messages import message_bp
    from challenge_coach.routes.uploads import upload_bp

    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(user_bp, url_prefix="/api")
    app.register_blueprint(challenge_bp, url_prefix="/api")
    app.register_blueprint(message_bp, url_prefix="/api")
    app.register_blueprint(upload_bp)

    # Socket.IO room handlers
    from challenge_coach import realtime  # noqa: F401

    @app.route("/")
    def health():
        return jsonify({"status": "ok"})

    @app.cli.command("init-db")
    def init_db():
        """Create all tables without running migrations."""
        db.create_all()
        app.logger.info("Database tables created")

    app.logger.info(f"Application created with '{config_name}' config")
    return app
