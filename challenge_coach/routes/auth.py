from flask import Blueprint, jsonify, current_app
from flask_jwt_extended import create_access_token

from challenge_coach.extensions import limiter
from challenge_coach.schemas import LoginSchema, RegisterSchema, user_schema
from challenge_coach.services import users as user_service
from challenge_coach.utils.decorators import json_body

auth_bp = Blueprint("auth", __name__)


def _login_limit():
    return current_app.config["LOGIN_RATE_LIMIT"]


# ---------------- API: Register ----------------
@auth_bp.route("/register", methods=["POST"])
@json_body(RegisterSchema())
def register(payload):
    user = user_service.register_user(payload["username"], payload["password"])
    return jsonify(user_schema.dump(user)), 201


# ---------------- API: Login ----------------
@auth_bp.route("/login", methods=["POST"])
@limiter.limit(_login_limit)
@json_body(LoginSchema())
def login(payload):
    user = user_service.authenticate_user(payload["username"], payload["password"])

    access_token = create_access_token(identity=str(user.id))
    data = user_schema.dump(user)
    data["access_token"] = access_token
    return jsonify(data), 200
