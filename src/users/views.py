from datetime import datetime, timezone

from django.conf import settings
from django.contrib.auth import authenticate
from drf_spectacular.utils import extend_schema, OpenApiResponse
from rest_framework import generics, status
from rest_framework import serializers as rf_serializers
from rest_framework.generics import CreateAPIView
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import (
    TokenObtainPairView as BaseTokenObtainPairView,
    TokenRefreshView as BaseTokenRefreshView,
)

from src.apartments.throttling import ScopedRateThrottleIsolated
from .serializers import CustomUserSerializer, RegistrationSerializer, LoginSerializer


class ThrottledTokenObtainPairView(BaseTokenObtainPairView):
    throttle_classes = (ScopedRateThrottle,)
    throttle_scope = 'auth_login'


class ThrottledTokenRefreshView(BaseTokenRefreshView):
    throttle_classes = (ScopedRateThrottle,)
    throttle_scope = 'auth_login'


class AuthResponseSerializer(rf_serializers.Serializer):
    detail = rf_serializers.CharField()
    access = rf_serializers.CharField()
    refresh = rf_serializers.CharField()
    user = CustomUserSerializer()


class SimpleDetailSerializer(rf_serializers.Serializer):
    detail = rf_serializers.CharField()


def _issue_tokens(user, detail, status_code):
    """Build the auth response: tokens in the body and as httpOnly cookies."""
    refresh = RefreshToken.for_user(user)
    access = refresh.access_token
    data = {
        "detail": detail,
        "access": str(access),
        "refresh": str(refresh),
        "user": CustomUserSerializer(user).data,
    }
    response = Response(data, status=status_code)
    for key, token in (('access_token', access), ('refresh_token', refresh)):
        response.set_cookie(
            key=key,
            value=str(token),
            httponly=True,
            secure=getattr(settings, 'AUTH_COOKIE_SECURE', not settings.DEBUG),
            samesite=getattr(settings, 'AUTH_COOKIE_SAMESITE', 'Lax'),
            expires=datetime.fromtimestamp(token['exp'], tz=timezone.utc),
            path='/',
        )
    return response


@extend_schema(
    summary="Register & set auth cookies",
    request=RegistrationSerializer,
    responses={
        201: OpenApiResponse(response=AuthResponseSerializer, description="Account created"),
        400: OpenApiResponse(description="Validation error"),
    },
    auth=[],
    tags=["auth"],
)
class RegisterView(CreateAPIView):
    serializer_class = RegistrationSerializer
    permission_classes = [AllowAny]
    throttle_classes = (ScopedRateThrottle,)
    throttle_scope = 'auth_register'

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return _issue_tokens(user, "Account created successfully.", status.HTTP_201_CREATED)


@extend_schema(tags=["auth"])
class LoginView(APIView):
    permission_classes = [AllowAny]
    serializer_class = LoginSerializer
    throttle_classes = (ScopedRateThrottleIsolated,)
    throttle_scope = 'auth_login'

    @extend_schema(
        request=LoginSerializer,
        responses={
            200: OpenApiResponse(response=AuthResponseSerializer, description="Login successful; cookies set"),
            401: OpenApiResponse(response=SimpleDetailSerializer, description="Invalid credentials"),
        },
        auth=[],
    )
    def post(self, request, *args, **kwargs):
        serializer = self.serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = authenticate(
            request,
            email=serializer.validated_data['email'].lower(),
            password=serializer.validated_data['password'],
        )
        if user is None:
            return Response({"detail": "Invalid credentials"}, status=status.HTTP_401_UNAUTHORIZED)
        return _issue_tokens(user, "Login successful", status.HTTP_200_OK)


@extend_schema(
    summary="Logout",
    request=None,
    responses={200: OpenApiResponse(response=SimpleDetailSerializer, description="Logged out")},
    tags=["auth"],
)
class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        response = Response({"detail": "Logout successful"}, status=status.HTTP_200_OK)
        response.delete_cookie('access_token', path='/')
        response.delete_cookie('refresh_token', path='/')
        return response


@extend_schema(tags=["auth"], summary="Current user profile")
class MeView(generics.RetrieveUpdateAPIView):
    serializer_class = CustomUserSerializer
    permission_classes = [IsAuthenticated]
    http_method_names = ['get', 'patch', 'head', 'options']

    def get_object(self):
        return self.request.user
