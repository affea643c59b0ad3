"""Per-challenge Socket.IO rooms.

Clients join ``challenge_{id}`` when they open a challenge's chat and leave
when they navigate away. The service publishes three events to a room:

``challengeStatusUpdated``
    ``{"challenge_id": int, "status": str}``
``updateMessages``
    the full, ordered message list of the challenge
``messagesRead``
    ``{"challenge_id": int, "user_id": int}``, a notice only

Publishing is fire-and-forget; a client that was not connected recovers by
re-fetching over HTTP.
"""
from flask import current_app, request
from flask_socketio import join_room, leave_room

from challenge_coach.extensions import socketio

CHALLENGE_STATUS_UPDATED = "challengeStatusUpdated"
UPDATE_MESSAGES = "updateMessages"
MESSAGES_READ = "messagesRead"


def room_for(challenge_id):
    return f"challenge_{challenge_id}"


def _coerce_challenge_id(raw):
    if isinstance(raw, dict):
        raw = raw.get("challenge_id", raw.get("challengeId"))
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def publish_status(challenge_id, status):
    current_app.logger.info(f"Broadcast {CHALLENGE_STATUS_UPDATED} to {room_for(challenge_id)}: {status}")
    socketio.emit(
        CHALLENGE_STATUS_UPDATED,
        {"challenge_id": challenge_id, "status": status},
        to=room_for(challenge_id),
    )


def publish_messages(challenge_id, messages):
    current_app.logger.info(f"Broadcast {UPDATE_MESSAGES} to {room_for(challenge_id)}: {len(messages)} messages")
    socketio.emit(UPDATE_MESSAGES, messages, to=room_for(challenge_id))


def publish_read(challenge_id, user_id):
    current_app.logger.info(f"Broadcast {MESSAGES_READ} to {room_for(challenge_id)} by user {user_id}")
    socketio.emit(
        MESSAGES_READ,
        {"challenge_id": challenge_id, "user_id": user_id},
        to=room_for(challenge_id),
    )


@socketio.on("connect")
def on_connect(auth=None):
    current_app.logger.debug(f"Socket connected: {request.sid}")


@socketio.on("disconnect")
def on_disconnect(*args):
    current_app.logger.debug(f"Socket disconnected: {request.sid}")


@socketio.on("joinRoom")
def on_join_room(data):
    challenge_id = _coerce_challenge_id(data)
    if challenge_id is None:
        current_app.logger.warning(f"Ignoring joinRoom with invalid challenge id: {data!r}")
        return
    join_room(room_for(challenge_id))
    current_app.logger.debug(f"{request.sid} joined {room_for(challenge_id)}")


@socketio.on("leaveRoom")
def on_leave_room(data):
    challenge_id = _coerce_challenge_id(data)
    if challenge_id is None:
        current_app.logger.warning(f"Ignoring leaveRoom with invalid challenge id: {data!r}")
        return
    leave_room(room_for(challenge_id))
    current_app.logger.debug(f"{request.sid} left {room_for(challenge_id)}")
