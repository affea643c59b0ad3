from flask import current_app

from challenge_coach.extensions import db
from challenge_coach.errors import AuthenticationError, NotFoundError, ValidationError
from challenge_coach.models import User
from challenge_coach.utils.decorators import store_call


@store_call
def register_user(username, password):
    username = username.strip()
    if User.query.filter_by(username=username).first():
        raise ValidationError("Username already taken")

    user = User(username=username)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    current_app.logger.info(f"Registered user {user.id} ({user.username})")
    return user


@store_call
def authenticate_user(username, password):
    """Return the user whose salted hash matches ``password``."""
    user = User.query.filter_by(username=username.strip()).first()
    if not user:
        current_app.logger.info(f"Login failed: user {username} not found")
        raise AuthenticationError()

    if not user.check_password(password):
        current_app.logger.info(f"Login failed: incorrect password for user {username}")
        raise AuthenticationError()

    current_app.logger.info(f"Login successful for user {user.username}")
    return user


@store_call
def get_username_by_id(user_id):
    user = db.session.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user.username


@store_call
def list_users():
    return User.query.order_by(User.username.asc()).all()
