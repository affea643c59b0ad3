"""Challenge chat threads.

Every mutation re-reads the whole thread inside the same transaction and
broadcasts it, so subscribers replace their local list instead of applying
diffs. Writes to one thread are serialized with a row lock on the challenge.
"""
from flask import current_app
from sqlalchemy import update

from challenge_coach import realtime
from challenge_coach.extensions import db
from challenge_coach.errors import InvalidReferenceError, NotFoundError, ValidationError
from challenge_coach.models import Challenge, Message, User
from challenge_coach.schemas import messages_schema
from challenge_coach.utils.decorators import store_call


def _lock_challenge(challenge_id):
    challenge = db.session.get(Challenge, challenge_id, with_for_update=True)
    if not challenge:
        raise NotFoundError("Challenge not found")
    return challenge


def _get_message(message_id):
    message = db.session.get(Message, message_id)
    if not message:
        raise NotFoundError("Message not found")
    return message


def _ordered_messages(challenge_id):
    return (
        Message.query
        .filter_by(challenge_id=challenge_id)
        .order_by(Message.created_at.asc(), Message.id.asc())
        .all()
    )


def _commit_and_broadcast(challenge_id):
    db.session.flush()
    thread = messages_schema.dump(_ordered_messages(challenge_id))
    db.session.commit()
    realtime.publish_messages(challenge_id, thread)
    return thread


@store_call
def get_messages(challenge_id):
    if not db.session.get(Challenge, challenge_id):
        raise NotFoundError("Challenge not found")
    return _ordered_messages(challenge_id)


@store_call
def post_message(challenge_id, user_id, text=None, image_url=None, is_proof=False):
    """Append a message and return ``(message, thread)``."""
    text = text.strip() if text else None
    image_url = image_url or None
    if not text and not image_url:
        raise ValidationError("A message needs text or an image")

    _lock_challenge(challenge_id)
    if not db.session.get(User, user_id):
        raise InvalidReferenceError(f"Unknown user: {user_id}")

    message = Message(
        challenge_id=challenge_id,
        user_id=user_id,
        text=text,
        image_url=image_url,
        is_proof=bool(is_proof),
        is_validated=False,
        is_read=False,
    )
    db.session.add(message)
    thread = _commit_and_broadcast(challenge_id)

    current_app.logger.info(f"User {user_id} posted message {message.id} to challenge {challenge_id}")
    return message, thread


@store_call
def set_message_proof(message_id, is_proof):
    message = _get_message(message_id)
    _lock_challenge(message.challenge_id)

    message.is_proof = bool(is_proof)
    if not message.is_proof:
        message.is_validated = False
    message.is_read = False
    _commit_and_broadcast(message.challenge_id)

    current_app.logger.info(f"Message {message.id} is_proof -> {message.is_proof}")
    return message


@store_call
def validate_message(message_id, is_validated):
    message = _get_message(message_id)
    if is_validated and not message.is_proof:
        raise ValidationError("Only proof messages can be validated")
    _lock_challenge(message.challenge_id)

    message.is_validated = bool(is_validated)
    message.is_read = False
    _commit_and_broadcast(message.challenge_id)

    current_app.logger.info(f"Message {message.id} is_validated -> {message.is_validated}")
    return message


@store_call
def mark_messages_read(challenge_id, user_id):
    """Mark the counterpart's messages as read; the reader's own stay untouched."""
    if not db.session.get(Challenge, challenge_id):
        raise NotFoundError("Challenge not found")
    if not db.session.get(User, user_id):
        raise InvalidReferenceError(f"Unknown user: {user_id}")

    db.session.execute(
        update(Message)
        .where(Message.challenge_id == challenge_id, Message.user_id != user_id)
        .values(is_read=True)
    )
    db.session.commit()

    realtime.publish_read(challenge_id, user_id)
    return _ordered_messages(challenge_id)
