# challenge_coach/utils/decorators.py
from functools import wraps
from flask import request, current_app
from sqlalchemy.exc import SQLAlchemyError

from challenge_coach.extensions import db
from challenge_coach.errors import ValidationError, translate_store_error


def json_body(schema):
    """
    Load the JSON request body through a marshmallow schema and pass the
    result to the view as the ``payload`` keyword argument.
    Unknown fields and missing required fields are rejected with a 400.
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(*args, **kwargs):
            data = request.get_json(silent=True)
            if not isinstance(data, dict):
                raise ValidationError("Request body must be a JSON object")
            kwargs['payload'] = schema.load(data)
            return view_func(*args, **kwargs)
        return wrapper
    return decorator


def store_call(func):
    """
    Run a service function against the store, rolling back and translating
    any SQLAlchemy failure into the service error taxonomy.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Error in {func.__name__}: {e}")
            raise translate_store_error(e) from e
    return wrapper


def int_arg(name):
    """Read a required integer query-string argument."""
    raw = request.args.get(name)
    if raw is None or raw == "":
        raise ValidationError(f"{name} is required")
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {name}")
