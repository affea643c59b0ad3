from flask import Blueprint, jsonify

from challenge_coach.schemas import users_schema, notifications_schema, notification_schema
from challenge_coach.services import users as user_service
from challenge_coach.services import notifications as notification_service
from challenge_coach.utils.decorators import int_arg

user_bp = Blueprint("users", __name__)


# ---------------- API: List users ----------------
@user_bp.route("/users", methods=["GET"])
def list_users():
    return jsonify(users_schema.dump(user_service.list_users()))


# ---------------- API: Username lookup ----------------
@user_bp.route("/users/username", methods=["GET"])
def get_username():
    user_id = int_arg("user_id")
    return jsonify({"username": user_service.get_username_by_id(user_id)})


# ---------------- API: Notifications ----------------
@user_bp.route("/notifications", methods=["GET"])
def list_notifications():
    user_id = int_arg("user_id")
    return jsonify(notifications_schema.dump(notification_service.list_notifications(user_id)))


@user_bp.route("/notifications/<int:notification_id>/read", methods=["PUT"])
def mark_notification_read(notification_id):
    notification = notification_service.mark_notification_read(notification_id)
    return jsonify(notification_schema.dump(notification))
