"""
Account API Views.

Implements:
- POST /login - Exchange username/password for a bearer token
- GET /personal - Profile of the token owner
- POST /personal - Register a new user
"""
import logging

from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.rate_limiting import rate_limit
from . import services
from .authentication import JWTAuthentication
from .serializers import LoginSerializer, PersonalSerializer, RegistrationSerializer
from .tokens import issue_token

logger = logging.getLogger(__name__)


class LoginView(APIView):
    """
    POST: Check credentials and return a signed token.

    Returns:
        - 200: {"jwtToken": "..."}
        - 401: Wrong password
        - 404: Unknown username
        - 429: Too many attempts from this client
    """

    @rate_limit(max_requests=10, window_seconds=60)
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = services.verify_credentials(
            serializer.validated_data['username'],
            serializer.validated_data['pw']
        )
        logger.info(f"User #{user.id} logged in")
        return Response({'jwtToken': issue_token(user)})


class PersonalView(APIView):
    """
    GET: Profile of the authenticated user (bearer token required)
    POST: Register a new user (no authentication)
    """

    def get_authenticators(self):
        if self.request.method == 'POST':
            return []
        return [JWTAuthentication()]

    def get_permissions(self):
        if self.request.method == 'POST':
            return [AllowAny()]
        return [IsAuthenticated()]

    def get(self, request):
        return Response(PersonalSerializer(request.user).data)

    @rate_limit(max_requests=5, window_seconds=60)
    def post(self, request):
        serializer = RegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.register_user(**serializer.validated_data)
        return Response()
