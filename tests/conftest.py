"""Shared fixtures: an app on in-memory SQLite, HTTP and Socket.IO test clients."""
import pytest

from challenge_coach import create_app
from challenge_coach.extensions import db as _db, socketio
from challenge_coach.models import User
from challenge_coach.services import challenges as challenge_service

DEFAULT_PASSWORD = "secret-pass-1"


@pytest.fixture
def app(tmp_path):
    app = create_app("testing", UPLOAD_FOLDER=str(tmp_path / "uploads"))
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def socket_client(app, client):
    sio = socketio.test_client(app, flask_test_client=client)
    yield sio
    if sio.is_connected():
        sio.disconnect()


def make_user(username, password=DEFAULT_PASSWORD):
    user = User(username=username)
    user.set_password(password)
    _db.session.add(user)
    _db.session.commit()
    return user


@pytest.fixture
def users(app):
    """alice is the challenger, bob coaches, carol is a spare coach."""
    return {name: make_user(name) for name in ("alice", "bob", "carol")}


def challenge_payload(user_id, coach_id, **overrides):
    payload = {
        "title": "30 Days",
        "description": "Work out every day for a month",
        "startDate": "2025-01-01",
        "endDate": "2025-01-31",
        "frequency": "Daily",
        "proofRequirements": "Photo of the finished workout",
        "user_id": user_id,
        "coachId": coach_id,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def challenge(users):
    from datetime import date

    return challenge_service.create_challenge(
        title="30 Days",
        description="Work out every day for a month",
        start_date=date(2025, 1, 1),
        end_date=date(2025, 1, 31),
        frequency="Daily",
        proof_requirements="Photo of the finished workout",
        user_id=users["alice"].id,
        coach_id=users["bob"].id,
    )


def received(socket_client, name):
    return [event["args"][0] for event in socket_client.get_received() if event["name"] == name]
