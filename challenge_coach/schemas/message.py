from marshmallow import fields
from challenge_coach.extensions import ma
from challenge_coach.models import Message


class MessageSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Message
        include_fk = True


class MessageCreateSchema(ma.Schema):
    user_id = fields.Int(required=True)
    text = fields.Str(allow_none=True, load_default=None)
    image_url = fields.Str(allow_none=True, load_default=None, data_key="imageUrl")
    is_proof = fields.Bool(load_default=False, data_key="isProof")


class MessageProofSchema(ma.Schema):
    is_proof = fields.Bool(required=True, data_key="isProof")


class MessageValidateSchema(ma.Schema):
    is_validated = fields.Bool(required=True, data_key="isValidated")


class MessagesReadSchema(ma.Schema):
    user_id = fields.Int(required=True)
