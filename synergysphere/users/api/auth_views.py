from __future__ import annotations

import logging
from typing import Any

from django.contrib.auth import authenticate
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView
from rest_framework_simplejwt.views import TokenRefreshView
from rest_framework_simplejwt.views import TokenVerifyView

from synergysphere.users.models import User

from .serializers import LoginSerializer
from .serializers import RegisterSerializer
from .serializers import UserSerializer

logger = logging.getLogger(__name__)


def _token_response(user: User) -> dict[str, Any]:
    """Body shape shared by register and login: access token plus the user."""

    refresh = RefreshToken.for_user(user)
    return {
        "token": str(refresh.access_token),
        "refresh": str(refresh),
        "user": UserSerializer(user).data,
    }


@extend_schema(tags=["Authentication"])
class RegisterView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []
    serializer_class = RegisterSerializer

    def post(self, request, *args, **kwargs):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("Registered user %s", user.pk)
        return Response(_token_response(user), status=status.HTTP_201_CREATED)


@extend_schema(tags=["Authentication"])
class LoginView(APIView):
    """Email/password login returning a bearer token for the SPA."""

    permission_classes = [AllowAny]
    authentication_classes: list = []
    serializer_class = LoginSerializer

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = authenticate(
            request,
            username=serializer.validated_data["email"],
            password=serializer.validated_data["password"],
        )
        if user is None:
            return Response(
                {"detail": "Invalid credentials."},
                status=status.HTTP_401_UNAUTHORIZED,
            )
        return Response(_token_response(user), status=status.HTTP_200_OK)


# Raw simplejwt endpoints, for clients that only need token pairs.
@extend_schema_view(post=extend_schema(tags=["Authentication"]))
class JWTCreateView(TokenObtainPairView):
    pass


@extend_schema_view(post=extend_schema(tags=["Authentication"]))
class JWTRefreshView(TokenRefreshView):
    pass


@extend_schema_view(post=extend_schema(tags=["Authentication"]))
class JWTVerifyView(TokenVerifyView):
    pass
