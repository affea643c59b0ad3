import os
import time
import uuid

from flask import current_app, url_for
from werkzeug.utils import secure_filename

from challenge_coach.errors import UploadError


def file_extension(filename):
    return filename.rsplit('.', 1)[1].lower() if '.' in filename else ''


def allowed_file(filename, mimetype):
    allowed = current_app.config['ALLOWED_IMAGE_TYPES']
    return mimetype in allowed and file_extension(filename) in allowed[mimetype]


def save_upload(file):
    """Store an uploaded proof image and describe where it can be fetched."""
    if file is None or not file.filename:
        raise UploadError("No file uploaded")

    original_name = secure_filename(file.filename) or file.filename
    if not allowed_file(original_name, file.mimetype):
        current_app.logger.warning(f"Rejected upload {file.filename!r} ({file.mimetype})")
        raise UploadError("Only image files (jpeg, png, gif) are allowed")

    upload_folder = current_app.config['UPLOAD_FOLDER']
    os.makedirs(upload_folder, exist_ok=True)

    filename = f"image-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}.{file_extension(original_name)}"
    filepath = os.path.join(upload_folder, filename)
    file.save(filepath)

    current_app.logger.info(f"Stored upload {filename}")
    return {
        "success": True,
        "imageUrl": url_for('uploads.uploaded_file', filename=filename, _external=True),
        "fileInfo": {
            "filename": filename,
            "originalname": file.filename,
            "mimetype": file.mimetype,
            "size": os.path.getsize(filepath),
        },
    }
