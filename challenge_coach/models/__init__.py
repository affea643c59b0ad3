from .user import User
from .challenge import Challenge, CHALLENGE_STATUSES, CHALLENGE_FREQUENCIES
from .message import Message
from .notification import Notification
from .reminder import Reminder
