"""
DRF authentication backed by the bearer tokens from accounts.tokens.

No WWW-Authenticate challenge is advertised, so DRF renders authentication
failures as 403.
"""
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication, get_authorization_header

from core.exceptions import Forbidden
from .models import User
from .tokens import verify_token


class JWTAuthentication(BaseAuthentication):
    """
    Authorization: Bearer <token>

    Returns (User, claims) on success.
    """
    keyword = b'bearer'

    def authenticate(self, request):
        auth = get_authorization_header(request).split()
        if not auth or auth[0].lower() != self.keyword:
            return None
        if len(auth) != 2:
            raise exceptions.AuthenticationFailed('Invalid token header.')

        try:
            claims = verify_token(auth[1].decode())
        except (Forbidden, UnicodeError) as e:
            raise exceptions.AuthenticationFailed(str(e))

        try:
            user = User.objects.get(pk=claims['userId'])
        except (User.DoesNotExist, ValueError, TypeError):
            raise exceptions.AuthenticationFailed('Token owner no longer exists.')

        return (user, claims)
