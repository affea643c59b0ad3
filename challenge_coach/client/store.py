"""Application state container for the sync client.

State is a plain dict replaced on every dispatch::

    {
        "user": {"id", "username"} | None,
        "challenges": {challenge_id: challenge},
        "messages": {challenge_id: [message, ...]},
        "notifications": [notification, ...],
        "last_error": {"operation", "error", "status"} | None,
    }

``reduce`` is pure; ``Store`` serializes dispatches because socket events are
delivered on the Socket.IO client thread.
"""
import threading

from challenge_coach.client import merge

LOGGED_IN = "LOGGED_IN"
LOGGED_OUT = "LOGGED_OUT"
CHALLENGES_FETCHED = "CHALLENGES_FETCHED"
CHALLENGE_OPTIMISTIC = "CHALLENGE_OPTIMISTIC"
CHALLENGE_UPSERTED = "CHALLENGE_UPSERTED"
CHALLENGE_REMOVED = "CHALLENGE_REMOVED"
CHALLENGE_STATUS_UPDATED = "CHALLENGE_STATUS_UPDATED"
MESSAGES_REPLACED = "MESSAGES_REPLACED"
MESSAGE_OPTIMISTIC = "MESSAGE_OPTIMISTIC"
MESSAGE_PATCHED = "MESSAGE_PATCHED"
MESSAGES_READ = "MESSAGES_READ"
NOTIFICATIONS_FETCHED = "NOTIFICATIONS_FETCHED"
NOTIFICATION_READ = "NOTIFICATION_READ"
SYNC_FAILED = "SYNC_FAILED"
SYNC_ERROR_CLEARED = "SYNC_ERROR_CLEARED"


def initial_state():
    return {
        "user": None,
        "challenges": {},
        "messages": {},
        "notifications": [],
        "last_error": None,
    }


def _with(state, **changes):
    new_state = dict(state)
    new_state.update(changes)
    return new_state


def _set_thread(state, challenge_id, messages):
    threads = dict(state["messages"])
    threads[challenge_id] = messages
    return _with(state, messages=threads)


def reduce(state, action):
    kind = action["type"]

    if kind == LOGGED_IN:
        return _with(initial_state(), user=action["user"])

    if kind == LOGGED_OUT:
        return initial_state()

    if kind == CHALLENGES_FETCHED:
        return _with(state, challenges=merge.merge_challenges(state["challenges"], action["challenges"]))

    if kind == CHALLENGE_OPTIMISTIC:
        challenges = dict(state["challenges"])
        challenge_id = action["challenge"]["id"]
        challenges[challenge_id] = dict(challenges.get(challenge_id, {}), **action["challenge"])
        return _with(state, challenges=challenges)

    if kind == CHALLENGE_UPSERTED:
        challenges = dict(state["challenges"])
        if action.get("replaces") is not None:
            challenges.pop(action["replaces"], None)
        challenges[action["challenge"]["id"]] = dict(action["challenge"])
        return _with(state, challenges=challenges)

    if kind == CHALLENGE_REMOVED:
        challenges = dict(state["challenges"])
        challenges.pop(action["challenge_id"], None)
        threads = dict(state["messages"])
        threads.pop(action["challenge_id"], None)
        return _with(state, challenges=challenges, messages=threads)

    if kind == CHALLENGE_STATUS_UPDATED:
        challenge = state["challenges"].get(action["challenge_id"])
        if challenge is None:
            return state
        challenges = dict(state["challenges"])
        challenges[action["challenge_id"]] = dict(challenge, status=action["status"])
        return _with(state, challenges=challenges)

    if kind == MESSAGES_REPLACED:
        current = state["messages"].get(action["challenge_id"])
        if not merge.should_replace_messages(current, action["messages"]):
            return state
        return _set_thread(state, action["challenge_id"], [dict(m) for m in action["messages"]])

    if kind == MESSAGE_OPTIMISTIC:
        thread = list(state["messages"].get(action["challenge_id"], []))
        thread.append(dict(action["message"]))
        return _set_thread(state, action["challenge_id"], thread)

    if kind == MESSAGE_PATCHED:
        thread = state["messages"].get(action["challenge_id"], [])
        return _set_thread(
            state,
            action["challenge_id"],
            merge.patch_message(thread, action["message_id"], action["changes"]),
        )

    if kind == MESSAGES_READ:
        thread = state["messages"].get(action["challenge_id"])
        if thread is None:
            return state
        return _set_thread(state, action["challenge_id"], merge.apply_read_notice(thread, action["user_id"]))

    if kind == NOTIFICATIONS_FETCHED:
        return _with(state, notifications=[dict(n) for n in action["notifications"]])

    if kind == NOTIFICATION_READ:
        notifications = [
            dict(n, read=True) if n["id"] == action["notification_id"] else n
            for n in state["notifications"]
        ]
        return _with(state, notifications=notifications)

    if kind == SYNC_FAILED:
        return _with(state, last_error={
            "operation": action["operation"],
            "error": action["error"],
            "status": action.get("status"),
        })

    if kind == SYNC_ERROR_CLEARED:
        return _with(state, last_error=None)

    raise ValueError(f"Unknown action type: {kind}")


class Store:
    def __init__(self, reducer=reduce, state=None):
        self._reducer = reducer
        self._state = state if state is not None else initial_state()
        self._listeners = []
        self._lock = threading.RLock()

    @property
    def state(self):
        return self._state

    def dispatch(self, action):
        with self._lock:
            self._state = self._reducer(self._state, action)
            state = self._state
            listeners = list(self._listeners)
        for listener in listeners:
            listener(state, action)
        return state

    def subscribe(self, listener):
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)
        return unsubscribe
