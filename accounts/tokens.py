"""
Signed bearer tokens (HS256 JWT) carrying the user identity.

Claims:
    userId   - User primary key
    username - User login name
    iat, exp - Issue and expiry time
"""
from datetime import timedelta
from typing import Dict

import jwt
from django.conf import settings
from django.utils import timezone

from core.exceptions import Forbidden

REQUIRED_CLAIMS = ['userId', 'username', 'exp']


def issue_token(user) -> str:
    now = timezone.now()
    payload = {
        'userId': user.id,
        'username': user.username,
        'iat': now,
        'exp': now + timedelta(seconds=settings.JWT_EXPIRATION_SECONDS),
    }
    return jwt.encode(payload, settings.JWT_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> Dict:
    """
    Verify signature, expiry and required claims.

    Raises:
        Forbidden: If the token is missing, malformed, tampered with or expired
    """
    if not token:
        raise Forbidden("Missing token")
    try:
        return jwt.decode(
            token,
            settings.JWT_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={'require': REQUIRED_CLAIMS}
        )
    except jwt.ExpiredSignatureError:
        raise Forbidden("Token has expired")
    except jwt.InvalidTokenError:
        raise Forbidden("Invalid token")
