from flask import Blueprint, jsonify

from challenge_coach.schemas import (
    ChallengeCreateSchema,
    ChallengeStatusSchema,
    CoachReassignSchema,
    challenge_schema,
    challenges_schema,
)
from challenge_coach.services import challenges as challenge_service
from challenge_coach.utils.decorators import int_arg, json_body

challenge_bp = Blueprint("challenges", __name__)


# ---------------- API: Challenges for a user ----------------
@challenge_bp.route("/challenges", methods=["GET"])
def list_challenges():
    user_id = int_arg("user_id")
    challenges = challenge_service.get_challenges_for_user(user_id)
    return jsonify(challenges_schema.dump(challenges))


# ---------------- API: Create challenge ----------------
@challenge_bp.route("/challenges", methods=["POST"])
@json_body(ChallengeCreateSchema())
def create_challenge(payload):
    challenge = challenge_service.create_challenge(**payload)
    return jsonify(challenge_schema.dump(challenge)), 201


@challenge_bp.route("/challenges/<int:challenge_id>", methods=["GET"])
def get_challenge(challenge_id):
    return jsonify(challenge_schema.dump(challenge_service.get_challenge(challenge_id)))


@challenge_bp.route("/challenges/<int:challenge_id>", methods=["DELETE"])
def delete_challenge(challenge_id):
    deleted_id = challenge_service.delete_challenge(challenge_id)
    return jsonify({"success": True, "id": deleted_id})


# ---------------- API: Status, coach, archive ----------------
@challenge_bp.route("/challenges/<int:challenge_id>/status", methods=["PUT"])
@json_body(ChallengeStatusSchema())
def update_status(challenge_id, payload):
    challenge = challenge_service.update_challenge_status(challenge_id, payload["status"])
    return jsonify(challenge_schema.dump(challenge))


@challenge_bp.route("/challenges/<int:challenge_id>/coach", methods=["PUT"])
@json_body(CoachReassignSchema())
def reassign_coach(challenge_id, payload):
    challenge = challenge_service.reassign_coach(challenge_id, payload["coach_id"])
    return jsonify(challenge_schema.dump(challenge))


@challenge_bp.route("/challenges/<int:challenge_id>/archive", methods=["PUT"])
def archive_challenge(challenge_id):
    challenge = challenge_service.archive_challenge(challenge_id)
    return jsonify(challenge_schema.dump(challenge))
