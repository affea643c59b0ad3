from .user import UserSchema, LoginSchema, RegisterSchema
from .challenge import (
    ChallengeSchema,
    ChallengeCreateSchema,
    ChallengeStatusSchema,
    CoachReassignSchema,
)
from .message import (
    MessageSchema,
    MessageCreateSchema,
    MessageProofSchema,
    MessageValidateSchema,
    MessagesReadSchema,
)
from .notification import NotificationSchema

user_schema = UserSchema()
users_schema = UserSchema(many=True)
challenge_schema = ChallengeSchema()
challenges_schema = ChallengeSchema(many=True)
message_schema = MessageSchema()
messages_schema = MessageSchema(many=True)
notification_schema = NotificationSchema()
notifications_schema = NotificationSchema(many=True)
