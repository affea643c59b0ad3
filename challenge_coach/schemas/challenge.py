from marshmallow import fields, validate, pre_load
from challenge_coach.extensions import ma
from challenge_coach.models import Challenge, CHALLENGE_FREQUENCIES
from .fields import FlexibleDate


class ChallengeSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Challenge
        include_fk = True


class ChallengeCreateSchema(ma.Schema):
    title = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    description = fields.Str(required=True, validate=validate.Length(min=1))
    start_date = FlexibleDate(required=True, data_key="startDate")
    end_date = FlexibleDate(required=True, data_key="endDate")
    frequency = fields.Str(required=True, validate=validate.OneOf(CHALLENGE_FREQUENCIES))
    proof_requirements = fields.Str(
        required=True, validate=validate.Length(min=1), data_key="proofRequirements"
    )
    user_id = fields.Int(required=True)
    coach_id = fields.Int(required=True, data_key="coachId")

    @pre_load
    def normalize_frequency(self, data, **kwargs):
        # "daily" / "WEEKLY" are accepted and stored in canonical form
        if isinstance(data, dict) and isinstance(data.get("frequency"), str):
            data = dict(data)
            data["frequency"] = data["frequency"].strip().capitalize()
        return data


class ChallengeStatusSchema(ma.Schema):
    status = fields.Str(required=True)


class CoachReassignSchema(ma.Schema):
    coach_id = fields.Int(required=True, data_key="coachId")
