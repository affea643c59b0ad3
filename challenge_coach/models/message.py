from datetime import datetime
from challenge_coach.extensions import db

class Message(db.Model):
    __tablename__ = "messages"

    id = db.Column(db.Integer, primary_key=True)
    challenge_id = db.Column(
        db.Integer,
        db.ForeignKey("challenges.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    text = db.Column(db.Text, nullable=True)
    image_url = db.Column(db.String(500), nullable=True)
    is_proof = db.Column(db.Boolean, default=False, nullable=False)
    is_validated = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    is_read = db.Column(db.Boolean, default=False, nullable=False, index=True)

    challenge = db.relationship("Challenge", back_populates="messages")
    author = db.relationship("User", back_populates="messages")

    __table_args__ = (
        db.Index("idx_messages_challenge_created", "challenge_id", "created_at"),
    )
