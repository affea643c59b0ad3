from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from challenge_coach.extensions import db

USERS_TABLE = "users"

class User(db.Model):
    __tablename__ = USERS_TABLE

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Challenges as challenger / as coach
    challenges = db.relationship(
        "Challenge",
        foreign_keys="[Challenge.user_id]",
        back_populates="challenger",
        lazy="dynamic",
    )
    coached_challenges = db.relationship(
        "Challenge",
        foreign_keys="[Challenge.coach_id]",
        back_populates="coach",
        lazy="dynamic",
    )

    messages = db.relationship("Message", back_populates="author", lazy="dynamic")
    notifications = db.relationship(
        "Notification",
        back_populates="user",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )

    # Helpers
    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def __repr__(self):
        return f"<User {self.id} {self.username}>"
