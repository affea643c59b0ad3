from sqlalchemy import text
from sqlalchemy.engine import make_url

from challenge_coach import create_app
from challenge_coach.config import Config, engine_options
from challenge_coach.extensions import db


class TestDatabaseSettings:
    def test_default_url_uses_shipped_driver(self):
        assert make_url(Config.SQLALCHEMY_DATABASE_URI).get_dialect().driver == "psycopg2"

    def test_postgres_gets_timeouts(self):
        options = engine_options({
            "SQLALCHEMY_DATABASE_URI": "postgresql+psycopg2://u:p@db/app",
            "STORE_TIMEOUT_MS": 8000,
            "STORE_CONNECT_TIMEOUT": 5,
        })
        assert options["connect_args"] == {"connect_timeout": 5, "options": "-c statement_timeout=8000"}

    def test_sqlite_gets_no_connect_args(self):
        options = engine_options({
            "SQLALCHEMY_DATABASE_URI": "sqlite:///app.db",
            "STORE_TIMEOUT_MS": 8000,
            "STORE_CONNECT_TIMEOUT": 5,
        })
        assert options == {}

    def test_development_config_runs_on_sqlite_file(self, tmp_path):
        app = create_app(
            "development",
            SQLALCHEMY_DATABASE_URI=f"sqlite:///{tmp_path / 'app.db'}",
            SOCKETIO_ASYNC_MODE="threading",
        )

        with app.app_context():
            with db.engine.connect() as connection:
                assert connection.execute(text("SELECT 1")).scalar() == 1
            db.engine.dispose()
