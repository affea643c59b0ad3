from datetime import datetime
from challenge_coach.extensions import db

CHALLENGE_STATUSES = ("pending", "active", "rejected")
CHALLENGE_FREQUENCIES = ("Daily", "Weekly")

class Challenge(db.Model):
    __tablename__ = "challenges"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    frequency = db.Column(
        db.String(20),
        db.CheckConstraint("frequency IN ('Daily','Weekly')"),
        nullable=False,
    )
    proof_requirements = db.Column(db.Text, nullable=False)
    status = db.Column(
        db.String(20),
        db.CheckConstraint("status IN ('pending','active','rejected')"),
        default="pending",
        nullable=False,
        index=True,
    )
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    coach_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    archived = db.Column(db.Boolean, default=False, nullable=False)

    challenger = db.relationship("User", foreign_keys=[user_id], back_populates="challenges")
    coach = db.relationship("User", foreign_keys=[coach_id], back_populates="coached_challenges")
    messages = db.relationship(
        "Message",
        back_populates="challenge",
        lazy="dynamic",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    reminders = db.relationship(
        "Reminder",
        back_populates="challenge",
        lazy="dynamic",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        db.Index("idx_challenges_user_id", "user_id"),
        db.Index("idx_challenges_coach_id", "coach_id"),
    )

    @property
    def is_pending(self):
        return self.status == "pending"