from flask import current_app

from challenge_coach.extensions import db
from challenge_coach.errors import NotFoundError
from challenge_coach.models import Notification
from challenge_coach.utils.decorators import store_call


def notify(user_id, message):
    """Queue a notification in the caller's transaction; the caller commits."""
    notification = Notification(user_id=user_id, message=message, read=False)
    db.session.add(notification)
    current_app.logger.debug(f"Notification for user {user_id}: {message}")
    return notification


@store_call
def list_notifications(user_id):
    return (
        Notification.query
        .filter_by(user_id=user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .all()
    )


@store_call
def mark_notification_read(notification_id):
    notification = db.session.get(Notification, notification_id)
    if not notification:
        raise NotFoundError("Notification not found")
    notification.mark_as_read()
    db.session.commit()
    return notification
