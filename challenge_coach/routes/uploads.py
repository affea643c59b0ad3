from flask import Blueprint, request, jsonify, send_from_directory, current_app

from challenge_coach.services.uploads import save_upload

upload_bp = Blueprint("uploads", __name__)


@upload_bp.route("/api/upload", methods=["POST"])
def upload_image():
    result = save_upload(request.files.get("image"))
    return jsonify(result), 200


@upload_bp.route("/uploads/<path:filename>", methods=["GET"])
def uploaded_file(filename):
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
