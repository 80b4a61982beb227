"""
Account Service Layer - registration and credential checks.

Passwords are hashed with the configured Django password hasher (bcrypt in
production) and never logged.
"""
import logging

from django.contrib.auth.hashers import check_password, make_password

from core.exceptions import NotFound, Unauthorized
from .models import User

logger = logging.getLogger(__name__)


def register_user(first_name: str, last_name: str, username: str, password: str) -> User:
    """Create a user, storing only a salted hash of the password."""
    user = User.objects.create(
        first_name=first_name,
        last_name=last_name,
        username=username,
        password=make_password(password),
        user_permissions=0
    )
    logger.info(f"Registered user #{user.id} ({user.username})")
    return user


def verify_credentials(username: str, password: str) -> User:
    """
    Check a username/password pair.

    Raises:
        NotFound: If no user has this username
        Unauthorized: If the password does not match
    """
    try:
        user = User.objects.get(username=username)
    except User.DoesNotExist:
        logger.info(f"Login attempt for unknown user '{username}'")
        raise NotFound("User not found")

    if not check_password(password, user.password):
        logger.warning(f"Failed login for user #{user.id}")
        raise Unauthorized("User not authorized")

    return user
