import logging
import os

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class ApiError(Exception):
    """A non-2xx response, or no response at all (``status_code`` is None)."""

    def __init__(self, status_code, message):
        super().__init__(f"{status_code}: {message}" if status_code else message)
        self.status_code = status_code
        self.message = message


def _iso(value):
    return value.isoformat() if hasattr(value, "isoformat") else value


class ApiClient:
    """Thin wrapper over the HTTP endpoints under ``/api``."""

    def __init__(self, base_url, timeout=DEFAULT_TIMEOUT, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.token = None

    def _request(self, method, path, **kwargs):
        url = f"{self.base_url}{path}"
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ApiError(None, str(e)) from e

        if not response.ok:
            try:
                message = response.json().get("error", response.reason)
            except ValueError:
                message = response.reason
            logger.warning(f"{method} {path} -> {response.status_code}: {message}")
            raise ApiError(response.status_code, message)
        return response.json()

    # ---------------- Users ----------------
    def login(self, username, password):
        data = self._request("POST", "/api/login", json={"username": username, "password": password})
        self.token = data.get("access_token")
        return {"id": data["id"], "username": data["username"]}

    def register(self, username, password):
        return self._request("POST", "/api/register", json={"username": username, "password": password})

    def get_users(self):
        return self._request("GET", "/api/users")

    def get_username(self, user_id):
        return self._request("GET", "/api/users/username", params={"user_id": user_id})["username"]

    # ---------------- Challenges ----------------
    def get_challenges(self, user_id):
        return self._request("GET", "/api/challenges", params={"user_id": user_id})

    def create_challenge(self, title, description, start_date, end_date, frequency,
                         proof_requirements, user_id, coach_id):
        return self._request("POST", "/api/challenges", json={
            "title": title,
            "description": description,
            "startDate": _iso(start_date),
            "endDate": _iso(end_date),
            "frequency": frequency,
            "proofRequirements": proof_requirements,
            "user_id": user_id,
            "coachId": coach_id,
        })

    def update_challenge_status(self, challenge_id, status):
        return self._request("PUT", f"/api/challenges/{challenge_id}/status", json={"status": status})

    def reassign_coach(self, challenge_id, coach_id):
        return self._request("PUT", f"/api/challenges/{challenge_id}/coach", json={"coachId": coach_id})

    def archive_challenge(self, challenge_id):
        return self._request("PUT", f"/api/challenges/{challenge_id}/archive")

    def delete_challenge(self, challenge_id):
        return self._request("DELETE", f"/api/challenges/{challenge_id}")

    # ---------------- Messages ----------------
    def get_messages(self, challenge_id):
        return self._request("GET", f"/api/challenges/{challenge_id}/messages")

    def send_message(self, challenge_id, user_id, text=None, image_url=None, is_proof=False):
        return self._request("POST", f"/api/challenges/{challenge_id}/messages", json={
            "user_id": user_id,
            "text": text,
            "imageUrl": image_url,
            "isProof": is_proof,
        })

    def validate_message(self, message_id, is_validated):
        return self._request("PUT", f"/api/messages/{message_id}/validate", json={"isValidated": is_validated})

    def set_message_proof(self, message_id, is_proof):
        return self._request("PUT", f"/api/messages/{message_id}/set-proof", json={"isProof": is_proof})

    def mark_messages_read(self, challenge_id, user_id):
        return self._request("PUT", f"/api/challenges/{challenge_id}/messages/read", json={"user_id": user_id})

    # ---------------- Notifications ----------------
    def get_notifications(self, user_id):
        return self._request("GET", "/api/notifications", params={"user_id": user_id})

    def mark_notification_read(self, notification_id):
        return self._request("PUT", f"/api/notifications/{notification_id}/read")

    # ---------------- Uploads ----------------
    def upload_image(self, path, mimetype="image/jpeg"):
        with open(path, "rb") as fh:
            files = {"image": (os.path.basename(path), fh, mimetype)}
            return self._request("POST", "/api/upload", files=files)
