from flask import Blueprint, jsonify

from challenge_coach.schemas import (
    MessageCreateSchema,
    MessageProofSchema,
    MessageValidateSchema,
    MessagesReadSchema,
    message_schema,
    messages_schema,
)
from challenge_coach.services import messages as message_service
from challenge_coach.utils.decorators import json_body

message_bp = Blueprint("messages", __name__)


# ---------------- API: Challenge thread ----------------
@message_bp.route("/challenges/<int:challenge_id>/messages", methods=["GET"])
def get_messages(challenge_id):
    return jsonify(messages_schema.dump(message_service.get_messages(challenge_id)))


@message_bp.route("/challenges/<int:challenge_id>/messages", methods=["POST"])
@json_body(MessageCreateSchema())
def post_message(challenge_id, payload):
    message, _ = message_service.post_message(challenge_id, **payload)
    return jsonify({"success": True, "message": message_schema.dump(message)}), 201


@message_bp.route("/challenges/<int:challenge_id>/messages/read", methods=["PUT"])
@json_body(MessagesReadSchema())
def mark_read(challenge_id, payload):
    messages = message_service.mark_messages_read(challenge_id, payload["user_id"])
    return jsonify(messages_schema.dump(messages))


# ---------------- API: Proof flags ----------------
@message_bp.route("/messages/<int:message_id>/validate", methods=["PUT"])
@json_body(MessageValidateSchema())
def validate_message(message_id, payload):
    message = message_service.validate_message(message_id, payload["is_validated"])
    return jsonify(message_schema.dump(message))


@message_bp.route("/messages/<int:message_id>/set-proof", methods=["PUT"])
@json_body(MessageProofSchema())
def set_proof(message_id, payload):
    message = message_service.set_message_proof(message_id, payload["is_proof"])
    return jsonify(message_schema.dump(message))
