from challenge_coach.extensions import db
from challenge_coach.models import Notification, User
from challenge_coach.services.notifications import notify

from tests.conftest import DEFAULT_PASSWORD, make_user


class TestRegister:
    def test_register_then_login(self, client):
        response = client.post("/api/register", json={"username": "dana", "password": "hunter22a"})
        assert response.status_code == 201
        user_id = response.get_json()["id"]

        login = client.post("/api/login", json={"username": "dana", "password": "hunter22a"})

        body = login.get_json()
        assert login.status_code == 200
        assert body["id"] == user_id
        assert body["username"] == "dana"
        assert body["access_token"]
        assert "password_hash" not in body

    def test_password_is_hashed(self, client):
        client.post("/api/register", json={"username": "dana", "password": "hunter22a"})
        user = User.query.filter_by(username="dana").one()
        assert user.password_hash != "hunter22a"
        assert user.check_password("hunter22a")

    def test_duplicate_username(self, client, users):
        response = client.post("/api/register", json={"username": "alice", "password": "another1pass"})
        assert response.status_code == 400
        assert response.get_json()["error"] == "Username already taken"

    def test_weak_password(self, client):
        response = client.post("/api/register", json={"username": "dana", "password": "short"})
        assert response.status_code == 400
        assert "password" in response.get_json()["fields"]


class TestLogin:
    def test_wrong_password(self, client, users):
        response = client.post("/api/login", json={"username": "alice", "password": "nope"})
        assert response.status_code == 401
        assert response.get_json() == {"error": "Invalid credentials"}

    def test_unknown_user_looks_the_same(self, client, users):
        response = client.post("/api/login", json={"username": "zed", "password": DEFAULT_PASSWORD})
        assert response.status_code == 401
        assert response.get_json() == {"error": "Invalid credentials"}

    def test_missing_fields(self, client):
        assert client.post("/api/login", json={"username": "alice"}).status_code == 400

    def test_body_must_be_json_object(self, client):
        response = client.post("/api/login", data="alice", content_type="text/plain")
        assert response.status_code == 400


class TestUsers:
    def test_list_is_ordered_by_username(self, client):
        for name in ("zoe", "adam", "mia"):
            make_user(name)

        listed = client.get("/api/users").get_json()

        assert [u["username"] for u in listed] == ["adam", "mia", "zoe"]
        assert all(set(u) == {"id", "username"} for u in listed)

    def test_username_lookup(self, client, users):
        response = client.get(f"/api/users/username?user_id={users['bob'].id}")
        assert response.get_json() == {"username": "bob"}

    def test_username_lookup_requires_id(self, client):
        assert client.get("/api/users/username").status_code == 400

    def test_username_lookup_unknown(self, client):
        response = client.get("/api/users/username?user_id=404")
        assert response.status_code == 404
        assert response.get_json() == {"error": "User not found"}


class TestNotifications:
    def test_newest_first(self, client, users):
        notify(users["alice"].id, "first")
        notify(users["alice"].id, "second")
        notify(users["bob"].id, "not yours")
        db.session.commit()

        listed = client.get(f"/api/notifications?user_id={users['alice'].id}").get_json()

        assert [n["message"] for n in listed] == ["second", "first"]
        assert all(n["read"] is False for n in listed)

    def test_mark_read(self, client, users):
        note = notify(users["alice"].id, "hello")
        db.session.commit()

        response = client.put(f"/api/notifications/{note.id}/read")

        assert response.get_json()["read"] is True
        assert Notification.query.filter_by(read=True).count() == 1

    def test_mark_read_unknown(self, client):
        assert client.put("/api/notifications/999/read").status_code == 404
