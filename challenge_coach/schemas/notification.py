from challenge_coach.extensions import ma
from challenge_coach.models import Notification


class NotificationSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Notification
        include_fk = True
