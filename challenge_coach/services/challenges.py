"""Challenge lifecycle: creation, status changes, coach reassignment, archival.

Status flow as the product intends it::

    pending --accept--> active
    pending --reject--> rejected
    any --reassign coach--> pending
    any --archive--> same status, archived=True

Transitions out of ``active`` or ``rejected`` are accepted but logged as
unintended; nothing here treats a status as immutable.
"""
from flask import current_app

from challenge_coach import realtime
from challenge_coach.extensions import db
from challenge_coach.errors import InvalidReferenceError, NotFoundError, ValidationError
from challenge_coach.models import Challenge, Message, Reminder, User, CHALLENGE_FREQUENCIES
from challenge_coach.services.notifications import notify
from challenge_coach.utils.decorators import store_call

REVIEWABLE_STATUSES = ("active", "rejected")

REQUIRED_FIELDS = (
    "title",
    "description",
    "start_date",
    "end_date",
    "frequency",
    "proof_requirements",
    "user_id",
    "coach_id",
)


def _require_user(user_id, role):
    user = db.session.get(User, user_id)
    if not user:
        raise InvalidReferenceError(f"Unknown {role}: {user_id}")
    return user


def _get_challenge(challenge_id):
    challenge = db.session.get(Challenge, challenge_id)
    if not challenge:
        raise NotFoundError("Challenge not found")
    return challenge


@store_call
def create_challenge(**fields):
    missing = [name for name in REQUIRED_FIELDS if fields.get(name) in (None, "")]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    if fields["frequency"] not in CHALLENGE_FREQUENCIES:
        raise ValidationError(f"Frequency must be one of: {', '.join(CHALLENGE_FREQUENCIES)}")

    if fields["end_date"] < fields["start_date"]:
        raise ValidationError("End date must not be before start date")

    if fields["user_id"] == fields["coach_id"]:
        raise ValidationError("A user cannot coach their own challenge")

    challenger = _require_user(fields["user_id"], "user")
    _require_user(fields["coach_id"], "coach")

    challenge = Challenge(
        title=fields["title"],
        description=fields["description"],
        start_date=fields["start_date"],
        end_date=fields["end_date"],
        frequency=fields["frequency"],
        proof_requirements=fields["proof_requirements"],
        user_id=fields["user_id"],
        coach_id=fields["coach_id"],
        status="pending",
        archived=False,
    )
    db.session.add(challenge)
    notify(
        fields["coach_id"],
        f"{challenger.username} asked you to coach '{fields['title']}'",
    )
    db.session.commit()

    current_app.logger.info(f"Created challenge {challenge.id} for user {challenge.user_id} (coach {challenge.coach_id})")
    return challenge


@store_call
def get_challenge(challenge_id):
    return _get_challenge(challenge_id)


@store_call
def get_challenges_for_user(user_id):
    """Challenges where the user is challenger or coach, newest first."""
    return (
        Challenge.query
        .filter((Challenge.user_id == user_id) | (Challenge.coach_id == user_id))
        .order_by(Challenge.created_at.desc(), Challenge.id.desc())
        .all()
    )


@store_call
def update_challenge_status(challenge_id, status):
    if status not in REVIEWABLE_STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(REVIEWABLE_STATUSES)}")

    challenge = _get_challenge(challenge_id)
    if not challenge.is_pending:
        current_app.logger.warning(
            f"Unintended status transition on challenge {challenge.id}: {challenge.status} -> {status}"
        )

    challenge.status = status
    verb = "accepted" if status == "active" else "rejected"
    notify(challenge.user_id, f"Your challenge '{challenge.title}' was {verb}")
    db.session.commit()

    current_app.logger.info(f"Challenge {challenge.id} status -> {status}")
    realtime.publish_status(challenge.id, status)
    return challenge


@store_call
def reassign_coach(challenge_id, new_coach_id):
    """Hand the challenge to another coach; approval always starts over."""
    challenge = _get_challenge(challenge_id)
    if new_coach_id == challenge.user_id:
        raise ValidationError("A user cannot coach their own challenge")
    new_coach = _require_user(new_coach_id, "coach")

    challenge.coach_id = new_coach.id
    challenge.status = "pending"
    notify(challenge.user_id, f"'{challenge.title}' is now coached by {new_coach.username}")
    notify(new_coach.id, f"You were asked to coach '{challenge.title}'")
    db.session.commit()

    current_app.logger.info(f"Challenge {challenge.id} reassigned to coach {new_coach.id}")
    realtime.publish_status(challenge.id, challenge.status)
    return challenge


@store_call
def archive_challenge(challenge_id):
    challenge = _get_challenge(challenge_id)
    if challenge.archived:
        return challenge

    challenge.archived = True
    notify(challenge.user_id, f"Challenge '{challenge.title}' was archived")
    db.session.commit()

    current_app.logger.info(f"Challenge {challenge.id} archived (status {challenge.status})")
    return challenge


@store_call
def delete_challenge(challenge_id):
    """Delete a challenge together with its messages and reminders."""
    challenge = _get_challenge(challenge_id)

    Message.query.filter_by(challenge_id=challenge.id).delete(synchronize_session=False)
    Reminder.query.filter_by(challenge_id=challenge.id).delete(synchronize_session=False)
    db.session.delete(challenge)
    db.session.commit()

    current_app.logger.info(f"Deleted challenge {challenge_id}")
    return challenge_id
