import re
from marshmallow import fields, validate, validates, ValidationError
from challenge_coach.extensions import ma
from challenge_coach.models import User


class UserSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = User
        exclude = ("password_hash", "created_at")


class LoginSchema(ma.Schema):
    username = fields.Str(required=True, validate=validate.Length(min=1))
    password = fields.Str(required=True, validate=validate.Length(min=1), load_only=True)


class RegisterSchema(ma.Schema):
    username = fields.Str(required=True, validate=validate.Length(min=3, max=80))
    password = fields.Str(required=True, load_only=True)

    @validates("password")
    def validate_password(self, password, **kwargs):
        if len(password) < 8:
            raise ValidationError("Password must be at least 8 characters")
        if not re.search(r"[A-Za-z]", password):
            raise ValidationError("Password must contain at least one letter")
        if not re.search(r"\d", password):
            raise ValidationError("Password must contain at least one number")
