"""User account service functions."""
from typing import Optional

from flask import current_app

from extensions import db
from models import User
from services.exceptions import ConflictError, InvalidArgumentError
from services.timezone_service import DEFAULT_TIMEZONE, is_valid_timezone


def create_user(email: str, username: str, password: str, timezone: Optional[str] = None) -> User:
    """
    Register a new user.

    Args:
        email: Unique login email
        username: Unique display name
        password: Plain-text password, stored as a bcrypt hash
        timezone: IANA timezone for goal days (defaults to DEFAULT_TIMEZONE)

    Returns:
        The created User
    """
    timezone = timezone or current_app.config.get('DEFAULT_TIMEZONE', DEFAULT_TIMEZONE)
    if not is_valid_timezone(timezone):
        raise InvalidArgumentError('Invalid timezone format. Must be a valid IANA timezone identifier.',
                                   code='INVALID_TIMEZONE')

    if User.query.filter((User.email == email) | (User.username == username)).first():
        raise ConflictError('Email or username already registered', code='USER_EXISTS')

    user = User(email=email, username=username, timezone=timezone)
    user.set_password(password)
    db.session.add(user)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return user


def authenticate_user(email: str, password: str) -> Optional[User]:
    """Return the user for valid credentials, otherwise None."""
    user = User.query.filter_by(email=email).first()
    if user and user.check_password(password):
        return user
    return None
