"""Client-side synchronization of challenges and chat threads.

Each user action is applied to the local Store immediately, then sent to the
server. Whatever the server returns (or later broadcasts) overwrites the
local guess. On failure the optimistic state stays in place and the error is
recorded in ``state["last_error"]`` so the UI can offer a retry; ``reconcile``
re-fetches the authoritative state.
"""
import itertools
import logging

from challenge_coach.client import store as actions
from challenge_coach.client.api import ApiError
from challenge_coach.client.store import Store

logger = logging.getLogger(__name__)


class ChallengeSync:
    def __init__(self, api, store=None, socket=None):
        self.api = api
        self.store = store or Store()
        self.socket = socket
        self._temp_ids = itertools.count(-1, -1)
        if socket is not None and socket.on_reconnect is None:
            socket.on_reconnect = self.reconcile

    @property
    def state(self):
        return self.store.state

    @property
    def user_id(self):
        user = self.state["user"]
        if user is None:
            raise RuntimeError("Not logged in")
        return user["id"]

    def _dispatch(self, kind, **payload):
        payload["type"] = kind
        return self.store.dispatch(payload)

    def _failed(self, operation, error):
        logger.warning(f"{operation} failed: {error}")
        self._dispatch(
            actions.SYNC_FAILED,
            operation=operation,
            error=error.message,
            status=error.status_code,
        )

    # ---------------- Session ----------------
    def login(self, username, password):
        """Authenticate and seed local state; raises ApiError on bad credentials."""
        user = self.api.login(username, password)
        self._dispatch(actions.LOGGED_IN, user=user)
        self.refresh()
        return user

    def logout(self):
        if self.socket is not None:
            for challenge_id in list(self.socket.rooms):
                self.socket.leave(challenge_id)
        self.api.token = None
        self._dispatch(actions.LOGGED_OUT)

    def refresh(self):
        try:
            challenges = self.api.get_challenges(self.user_id)
            notifications = self.api.get_notifications(self.user_id)
        except ApiError as e:
            self._failed("refresh", e)
            return False
        self._dispatch(actions.CHALLENGES_FETCHED, challenges=challenges)
        self._dispatch(actions.NOTIFICATIONS_FETCHED, notifications=notifications)
        return True

    def reconcile(self, challenge_id=None):
        """Drop back to server state after a failure or a missed broadcast."""
        ok = self.refresh()
        challenge_ids = [challenge_id] if challenge_id is not None else list(self.state["messages"])
        for cid in challenge_ids:
            ok = self.load_messages(cid) and ok
        if ok:
            self._dispatch(actions.SYNC_ERROR_CLEARED)
        return ok

    # ---------------- Challenges ----------------
    def create_challenge(self, title, description, start_date, end_date, frequency,
                         proof_requirements, coach_id):
        temp_id = next(self._temp_ids)
        self._dispatch(actions.CHALLENGE_OPTIMISTIC, challenge={
            "id": temp_id,
            "title": title,
            "description": description,
            "start_date": start_date.isoformat() if hasattr(start_date, "isoformat") else start_date,
            "end_date": end_date.isoformat() if hasattr(end_date, "isoformat") else end_date,
            "frequency": frequency,
            "proof_requirements": proof_requirements,
            "status": "pending",
            "user_id": self.user_id,
            "coach_id": coach_id,
            "created_at": None,
            "archived": False,
        })
        try:
            challenge = self.api.create_challenge(
                title, description, start_date, end_date, frequency,
                proof_requirements, self.user_id, coach_id,
            )
        except ApiError as e:
            self._failed("create_challenge", e)
            return None
        self._dispatch(actions.CHALLENGE_UPSERTED, challenge=challenge, replaces=temp_id)
        return challenge

    def _update_challenge(self, operation, challenge_id, optimistic, call):
        self._dispatch(actions.CHALLENGE_OPTIMISTIC, challenge=dict(optimistic, id=challenge_id))
        try:
            challenge = call()
        except ApiError as e:
            self._failed(operation, e)
            return None
        self._dispatch(actions.CHALLENGE_UPSERTED, challenge=challenge)
        return challenge

    def update_status(self, challenge_id, status):
        return self._update_challenge(
            "update_status", challenge_id, {"status": status},
            lambda: self.api.update_challenge_status(challenge_id, status),
        )

    def accept_challenge(self, challenge_id):
        return self.update_status(challenge_id, "active")

    def reject_challenge(self, challenge_id):
        return self.update_status(challenge_id, "rejected")

    def reassign_coach(self, challenge_id, coach_id):
        return self._update_challenge(
            "reassign_coach", challenge_id, {"coach_id": coach_id, "status": "pending"},
            lambda: self.api.reassign_coach(challenge_id, coach_id),
        )

    def archive_challenge(self, challenge_id):
        return self._update_challenge(
            "archive_challenge", challenge_id, {"archived": True},
            lambda: self.api.archive_challenge(challenge_id),
        )

    def delete_challenge(self, challenge_id):
        self._dispatch(actions.CHALLENGE_REMOVED, challenge_id=challenge_id)
        try:
            self.api.delete_challenge(challenge_id)
        except ApiError as e:
            self._failed("delete_challenge", e)
            return False
        return True

    # ---------------- Chat ----------------
    def open_chat(self, challenge_id):
        if self.socket is not None:
            self.socket.join(challenge_id)
        if self.load_messages(challenge_id):
            self.mark_read(challenge_id)

    def close_chat(self, challenge_id):
        if self.socket is not None:
            self.socket.leave(challenge_id)

    def load_messages(self, challenge_id):
        try:
            messages = self.api.get_messages(challenge_id)
        except ApiError as e:
            self._failed("load_messages", e)
            return False
        self._dispatch(actions.MESSAGES_REPLACED, challenge_id=challenge_id, messages=messages)
        return True

    def send_message(self, challenge_id, text=None, image_url=None, is_proof=False):
        self._dispatch(actions.MESSAGE_OPTIMISTIC, challenge_id=challenge_id, message={
            "id": next(self._temp_ids),
            "challenge_id": challenge_id,
            "user_id": self.user_id,
            "text": text,
            "image_url": image_url,
            "is_proof": is_proof,
            "is_validated": False,
            "is_read": False,
            "created_at": None,
        })
        try:
            response = self.api.send_message(challenge_id, self.user_id, text, image_url, is_proof)
        except ApiError as e:
            self._failed("send_message", e)
            return None
        # The broadcast may not reach us; fetch the thread the server now holds
        self.load_messages(challenge_id)
        return response["message"]

    def _update_message(self, operation, challenge_id, message_id, changes, call):
        self._dispatch(
            actions.MESSAGE_PATCHED,
            challenge_id=challenge_id,
            message_id=message_id,
            changes=changes,
        )
        try:
            message = call()
        except ApiError as e:
            self._failed(operation, e)
            return None
        # The response may be older than a broadcast already applied; refetch the thread instead
        self.load_messages(challenge_id)
        return message

    def set_proof(self, challenge_id, message_id, is_proof):
        changes = {"is_proof": is_proof, "is_read": False}
        if not is_proof:
            changes["is_validated"] = False
        return self._update_message(
            "set_proof", challenge_id, message_id, changes,
            lambda: self.api.set_message_proof(message_id, is_proof),
        )

    def validate_proof(self, challenge_id, message_id, is_validated):
        return self._update_message(
            "validate_proof", challenge_id, message_id,
            {"is_validated": is_validated, "is_read": False},
            lambda: self.api.validate_message(message_id, is_validated),
        )

    def mark_read(self, challenge_id):
        self._dispatch(actions.MESSAGES_READ, challenge_id=challenge_id, user_id=self.user_id)
        try:
            messages = self.api.mark_messages_read(challenge_id, self.user_id)
        except ApiError as e:
            self._failed("mark_read", e)
            return False
        self._dispatch(actions.MESSAGES_REPLACED, challenge_id=challenge_id, messages=messages)
        return True

    # ---------------- Notifications ----------------
    def mark_notification_read(self, notification_id):
        self._dispatch(actions.NOTIFICATION_READ, notification_id=notification_id)
        try:
            self.api.mark_notification_read(notification_id)
        except ApiError as e:
            self._failed("mark_notification_read", e)
            return False
        return True
