from unittest.mock import MagicMock

import pytest

from challenge_coach.client import ApiError, ChallengeSync
from challenge_coach.client import store as actions
from challenge_coach.client.subscription import ChallengeSocket


def server_message(id, text, user_id=1, **extra):
    return dict({
        "id": id, "challenge_id": 9, "user_id": user_id, "text": text, "image_url": None,
        "is_proof": False, "is_validated": False, "is_read": False, "created_at": "2025-01-01T00:00:00",
    }, **extra)


@pytest.fixture
def api():
    api = MagicMock()
    api.login.return_value = {"id": 1, "username": "alice"}
    api.get_challenges.return_value = [{"id": 9, "status": "pending", "archived": False, "created_at": "2025-01-01"}]
    api.get_notifications.return_value = []
    api.get_messages.return_value = []
    return api


@pytest.fixture
def sync(api):
    sync = ChallengeSync(api)
    sync.login("alice", "secret-pass-1")
    return sync


class TestSession:
    def test_login_loads_challenges(self, sync):
        assert sync.state["user"] == {"id": 1, "username": "alice"}
        assert list(sync.state["challenges"]) == [9]

    def test_bad_credentials_propagate(self, api):
        api.login.side_effect = ApiError(401, "Invalid credentials")
        with pytest.raises(ApiError):
            ChallengeSync(api).login("alice", "nope")

    def test_logout_clears_state(self, sync, api):
        sync.logout()
        assert sync.state["user"] is None
        assert api.token is None


class TestChallenges:
    def test_accept_is_optimistic_then_confirmed(self, sync, api):
        api.update_challenge_status.return_value = {"id": 9, "status": "active", "archived": False}

        sync.accept_challenge(9)

        api.update_challenge_status.assert_called_once_with(9, "active")
        assert sync.state["challenges"][9]["status"] == "active"

    def test_failure_keeps_local_guess_and_records_error(self, sync, api):
        api.update_challenge_status.side_effect = ApiError(500, "Database error")

        assert sync.reject_challenge(9) is None

        assert sync.state["challenges"][9]["status"] == "rejected"
        assert sync.state["last_error"] == {"operation": "update_status", "error": "Database error", "status": 500}

    def test_reconcile_restores_server_state(self, sync, api):
        api.update_challenge_status.side_effect = ApiError(None, "connection refused")
        sync.accept_challenge(9)

        assert sync.reconcile()

        assert sync.state["challenges"][9]["status"] == "pending"
        assert sync.state["last_error"] is None

    def test_create_replaces_placeholder(self, sync, api):
        api.create_challenge.return_value = {"id": 10, "title": "Run", "status": "pending", "archived": False}

        created = sync.create_challenge("Run", "5k", "2025-01-01", "2025-01-31", "Daily", "Screenshot", coach_id=2)

        assert created["id"] == 10
        assert 10 in sync.state["challenges"]
        assert not any(cid < 0 for cid in sync.state["challenges"])

    def test_failed_create_leaves_placeholder(self, sync, api):
        api.create_challenge.side_effect = ApiError(400, "Unknown coach: 7")

        sync.create_challenge("Run", "5k", "2025-01-01", "2025-01-31", "Daily", "Screenshot", coach_id=7)

        placeholders = [c for c in sync.state["challenges"].values() if c["id"] < 0]
        assert len(placeholders) == 1 and placeholders[0]["status"] == "pending"
        assert sync.state["last_error"]["status"] == 400


class TestChat:
    def test_send_shows_message_then_server_thread(self, sync, api):
        seen = []
        sync.store.subscribe(lambda state, action: seen.append([m["id"] for m in state["messages"].get(9, [])]))
        api.send_message.return_value = {"success": True, "message": server_message(1, "hi")}
        api.get_messages.return_value = [server_message(1, "hi")]

        sync.send_message(9, text="hi")

        assert seen[0] == [-1]
        assert [m["id"] for m in sync.state["messages"][9]] == [1]

    def test_failed_send_keeps_optimistic_message(self, sync, api):
        api.send_message.side_effect = ApiError(500, "Database error")

        assert sync.send_message(9, text="hi") is None

        assert [m["text"] for m in sync.state["messages"][9]] == ["hi"]
        assert sync.state["last_error"]["operation"] == "send_message"

    def test_open_chat_joins_room_and_marks_read(self, api):
        socket = MagicMock(on_reconnect=None, rooms=set())
        sync = ChallengeSync(api, socket=socket)
        sync.login("alice", "secret-pass-1")
        api.mark_messages_read.return_value = []

        sync.open_chat(9)

        socket.join.assert_called_once_with(9)
        api.mark_messages_read.assert_called_once_with(9, 1)

    def test_unproof_clears_validation_locally(self, sync, api):
        api.get_messages.return_value = [server_message(1, "photo", is_proof=True, is_validated=True)]
        sync.load_messages(9)
        api.set_message_proof.side_effect = ApiError(None, "timeout")

        sync.set_proof(9, 1, False)

        message = sync.state["messages"][9][0]
        assert message["is_proof"] is False and message["is_validated"] is False

    def test_late_response_does_not_undo_newer_broadcast(self, sync, api):
        api.get_messages.return_value = [server_message(1, "photo")]
        sync.load_messages(9)
        validated = server_message(1, "photo", is_proof=True, is_validated=True)

        def set_proof_while_coach_validates(message_id, is_proof):
            sync.store.dispatch({"type": actions.MESSAGES_REPLACED, "challenge_id": 9, "messages": [validated]})
            return server_message(1, "photo", is_proof=True)

        api.set_message_proof.side_effect = set_proof_while_coach_validates
        api.get_messages.return_value = [validated]

        returned = sync.set_proof(9, 1, True)

        assert returned["is_validated"] is False
        assert sync.state["messages"][9][0]["is_validated"] is True
        assert api.get_messages.call_count == 2


class TestSocket:
    def test_broadcasts_feed_the_store(self, sync):
        fake = MagicMock(connected=True)
        socket = ChallengeSocket(sync.store, "http://localhost:3001", client=fake)

        socket._on_status_updated({"challenge_id": 9, "status": "active"})
        socket._on_update_messages([server_message(1, "hi"), server_message(2, "hello", user_id=2)])
        socket._on_messages_read({"challenge_id": 9, "user_id": 2})

        assert sync.state["challenges"][9]["status"] == "active"
        assert [m["is_read"] for m in sync.state["messages"][9]] == [True, False]

    def test_reconnect_rejoins_and_reconciles(self, sync):
        fake = MagicMock(connected=True)
        on_reconnect = MagicMock()
        socket = ChallengeSocket(sync.store, "http://localhost:3001", client=fake, on_reconnect=on_reconnect)
        socket.join(9)

        socket._on_connect()
        on_reconnect.assert_not_called()
        socket._on_connect()

        on_reconnect.assert_called_once()
        assert fake.emit.call_args_list[-1].args == ("joinRoom", 9)

    def test_empty_update_is_ignored(self, sync):
        socket = ChallengeSocket(sync.store, "http://localhost:3001", client=MagicMock())
        socket._on_update_messages([])
        assert 9 not in sync.state["messages"]
