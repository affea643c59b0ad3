from unittest.mock import MagicMock

from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError

from challenge_coach.errors import (
    QUERY_CANCELED,
    ReferentialIntegrityError,
    StoreError,
    StoreTimeoutError,
    translate_store_error,
)


def orig(pgcode=None):
    error = MagicMock()
    error.pgcode = pgcode
    return error


class TestTranslateStoreError:
    def test_integrity_violation(self):
        translated = translate_store_error(IntegrityError("INSERT", {}, orig("23503")))
        assert isinstance(translated, ReferentialIntegrityError)
        assert translated.status_code == 500

    def test_statement_timeout(self):
        translated = translate_store_error(OperationalError("SELECT", {}, orig(QUERY_CANCELED)))
        assert isinstance(translated, StoreTimeoutError)
        assert translated.status_code == 504

    def test_other_operational_error(self):
        translated = translate_store_error(OperationalError("SELECT", {}, orig("08006")))
        assert type(translated) is StoreError

    def test_anything_else(self):
        translated = translate_store_error(ProgrammingError("SELECT", {}, orig()))
        assert type(translated) is StoreError
        assert translated.to_dict() == {"error": "Database error"}


class TestHttpErrors:
    def test_unknown_route_is_json(self, client):
        response = client.get("/api/nowhere")
        assert response.status_code == 404
        assert response.get_json() == {"error": "Not found"}

    def test_wrong_method_is_json(self, client):
        response = client.patch("/api/users")
        assert response.status_code == 405
        assert response.get_json() == {"error": "Method not allowed"}

    def test_health(self, client):
        assert client.get("/").status_code == 200
