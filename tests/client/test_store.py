import pytest

from challenge_coach.client import store as actions
from challenge_coach.client.store import Store, initial_state, reduce


def thread(*ids):
    return [{"id": i, "challenge_id": 9, "user_id": 1, "is_read": False} for i in ids]


class TestReduce:
    def test_status_update_for_known_challenge(self):
        state = reduce(initial_state(), {"type": actions.CHALLENGES_FETCHED, "challenges": [{"id": 9, "status": "pending"}]})
        state = reduce(state, {"type": actions.CHALLENGE_STATUS_UPDATED, "challenge_id": 9, "status": "active"})
        assert state["challenges"][9]["status"] == "active"

    def test_status_update_for_unknown_challenge_is_ignored(self):
        state = initial_state()
        assert reduce(state, {"type": actions.CHALLENGE_STATUS_UPDATED, "challenge_id": 9, "status": "active"}) is state

    def test_stale_message_list_is_dropped(self):
        state = reduce(initial_state(), {"type": actions.MESSAGES_REPLACED, "challenge_id": 9, "messages": thread(1, 2, 3)})
        stale = reduce(state, {"type": actions.MESSAGES_REPLACED, "challenge_id": 9, "messages": thread(1, 2)})
        assert [m["id"] for m in stale["messages"][9]] == [1, 2, 3]

    def test_server_list_replaces_optimistic_message(self):
        state = reduce(initial_state(), {"type": actions.MESSAGES_REPLACED, "challenge_id": 9, "messages": thread(1)})
        state = reduce(state, {"type": actions.MESSAGE_OPTIMISTIC, "challenge_id": 9, "message": {"id": -1, "user_id": 1}})
        state = reduce(state, {"type": actions.MESSAGES_REPLACED, "challenge_id": 9, "messages": thread(1, 2)})
        assert [m["id"] for m in state["messages"][9]] == [1, 2]

    def test_upserted_challenge_replaces_placeholder(self):
        state = reduce(initial_state(), {"type": actions.CHALLENGE_OPTIMISTIC, "challenge": {"id": -1, "title": "x"}})
        state = reduce(state, {"type": actions.CHALLENGE_UPSERTED, "challenge": {"id": 4, "title": "x"}, "replaces": -1})
        assert list(state["challenges"]) == [4]

    def test_removed_challenge_drops_thread(self):
        state = reduce(initial_state(), {"type": actions.CHALLENGES_FETCHED, "challenges": [{"id": 9}]})
        state = reduce(state, {"type": actions.MESSAGES_REPLACED, "challenge_id": 9, "messages": thread(1)})
        state = reduce(state, {"type": actions.CHALLENGE_REMOVED, "challenge_id": 9})
        assert state["challenges"] == {} and state["messages"] == {}

    def test_logout_resets(self):
        state = reduce(initial_state(), {"type": actions.LOGGED_IN, "user": {"id": 1, "username": "alice"}})
        assert reduce(state, {"type": actions.LOGGED_OUT}) == initial_state()

    def test_sync_error_recorded_and_cleared(self):
        state = reduce(initial_state(), {"type": actions.SYNC_FAILED, "operation": "send_message", "error": "boom", "status": 500})
        assert state["last_error"] == {"operation": "send_message", "error": "boom", "status": 500}
        assert reduce(state, {"type": actions.SYNC_ERROR_CLEARED})["last_error"] is None

    def test_reduce_does_not_mutate_input(self):
        state = initial_state()
        reduce(state, {"type": actions.CHALLENGE_OPTIMISTIC, "challenge": {"id": -1}})
        assert state == initial_state()

    def test_unknown_action(self):
        with pytest.raises(ValueError):
            reduce(initial_state(), {"type": "NOPE"})


class TestStore:
    def test_listeners_see_new_state(self):
        store = Store()
        seen = []
        unsubscribe = store.subscribe(lambda state, action: seen.append(action["type"]))

        store.dispatch({"type": actions.LOGGED_OUT})
        unsubscribe()
        store.dispatch({"type": actions.LOGGED_OUT})

        assert seen == [actions.LOGGED_OUT]
