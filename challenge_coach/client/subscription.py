import logging

import socketio

from challenge_coach.client import store as actions

logger = logging.getLogger(__name__)


class ChallengeSocket:
    """Subscribes to challenge rooms and feeds broadcast events into a Store.

    Joined rooms are remembered and re-joined after a reconnect; ``on_reconnect``
    is called afterwards so the owner can re-fetch whatever was missed while
    disconnected.
    """

    def __init__(self, store, url, client=None, on_reconnect=None):
        self.store = store
        self.url = url
        self.rooms = set()
        self.on_reconnect = on_reconnect
        self._connected_once = False
        self.sio = client or socketio.Client(reconnection=True)

        self.sio.on("connect", self._on_connect)
        self.sio.on("challengeStatusUpdated", self._on_status_updated)
        self.sio.on("updateMessages", self._on_update_messages)
        self.sio.on("messagesRead", self._on_messages_read)

    @property
    def connected(self):
        return self.sio.connected

    def connect(self):
        self.sio.connect(self.url)

    def disconnect(self):
        self.sio.disconnect()

    def join(self, challenge_id):
        self.rooms.add(challenge_id)
        if self.connected:
            self.sio.emit("joinRoom", challenge_id)

    def leave(self, challenge_id):
        self.rooms.discard(challenge_id)
        if self.connected:
            self.sio.emit("leaveRoom", challenge_id)

    def _on_connect(self):
        for challenge_id in self.rooms:
            self.sio.emit("joinRoom", challenge_id)
        if self._connected_once and self.on_reconnect:
            logger.info("Socket reconnected; reconciling state")
            self.on_reconnect()
        self._connected_once = True

    def _on_status_updated(self, data):
        self.store.dispatch({
            "type": actions.CHALLENGE_STATUS_UPDATED,
            "challenge_id": data["challenge_id"],
            "status": data["status"],
        })

    def _on_update_messages(self, messages):
        if not messages:
            return
        self.store.dispatch({
            "type": actions.MESSAGES_REPLACED,
            "challenge_id": messages[0]["challenge_id"],
            "messages": messages,
        })

    def _on_messages_read(self, data):
        self.store.dispatch({
            "type": actions.MESSAGES_READ,
            "challenge_id": data["challenge_id"],
            "user_id": data["user_id"],
        })
