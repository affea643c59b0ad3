"""Python client that mirrors server state for one logged-in user."""
from .api import ApiClient, ApiError
from .store import Store, reduce, initial_state
from .subscription import ChallengeSocket
from .sync import ChallengeSync
