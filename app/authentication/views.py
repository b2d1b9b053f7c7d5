"""
Authentication views.

This module provides API views for:
- Registration, login, token refresh and logout (simplejwt)
- Email verification and resending the verification email
- Current user profile, language and theme
- Community stats for the current user

Related files:
    - serializers.py: Request/response serialization
    - services.py: Business logic (AuthService, UserService)
    - urls.py: URL routing
"""

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView

from authentication.serializers import (
    AuthResponseSerializer,
    EmailVerificationSerializer,
    LanguageSerializer,
    LoginSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
    ThemeSerializer,
    UserSerializer,
    UserStatsSerializer,
)
from authentication.services import AuthService, UserService
from core.views import result_response


# =============================================================================
# Registration & Login
# =============================================================================


class RegisterView(APIView):
    """
    API view for email/password registration.

    POST: Create an account and return a JWT pair

    URL: /api/v1/auth/register/
    """

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="auth_register",
        summary="Register a new account",
        description=(
            "Create an unverified account. A verification link is emailed; "
            "posting, commenting and reviewing require a verified email."
        ),
        tags=["Auth"],
        request=RegisterSerializer,
        responses={
            201: AuthResponseSerializer,
            400: OpenApiResponse(description="Validation error or email already registered"),
        },
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AuthService.register(**serializer.validated_data)
        if not result:
            return result_response(result)

        payload = {
            **result.data["tokens"],
            "user": UserSerializer(result.data["user"]).data,
        }
        return Response(payload, status=status.HTTP_201_CREATED)


@extend_schema(
    operation_id="auth_login",
    summary="Log in",
    description="Exchange email and password for an access/refresh JWT pair.",
    tags=["Auth"],
)
class LoginView(TokenObtainPairView):
    """
    API view for email/password login.

    URL: /api/v1/auth/login/
    """

    serializer_class = LoginSerializer


# =============================================================================
# Email Verification
# =============================================================================


class EmailVerificationView(APIView):
    """
    API view for email verification.

    POST: Verify email with token

    URL: /api/v1/auth/verify-email/
    """

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="auth_verify_email",
        summary="Verify email address",
        description="Verify the user's email using the token sent to their inbox.",
        tags=["Auth"],
        request=EmailVerificationSerializer,
        responses={
            200: OpenApiResponse(description="Email verified"),
            400: OpenApiResponse(description="Invalid or expired token"),
        },
    )
    def post(self, request):
        serializer = EmailVerificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AuthService.verify_email(serializer.validated_data["token"])
        if not result:
            return result_response(result)

        return Response({"detail": "Email verified successfully"})


class ResendEmailView(APIView):
    """
    API view for resending the verification email.

    URL: /api/v1/auth/resend-email/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="auth_resend_email",
        summary="Resend verification email",
        tags=["Auth"],
        request=None,
        responses={200: OpenApiResponse(description="Verification email queued")},
    )
    def post(self, request):
        result = AuthService.resend_verification_email(request.user)
        if not result:
            return result_response(result)
        return Response({"detail": "Verification email sent"})


# =============================================================================
# Current User
# =============================================================================


class MeView(APIView):
    """
    API view for the authenticated user.

    URL: /api/v1/auth/me/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="auth_me",
        summary="Get current user",
        tags=["Auth"],
        responses={200: UserSerializer},
    )
    def get(self, request):
        return Response(UserSerializer(request.user).data)


class ProfileView(APIView):
    """
    API view for user profile operations.

    GET: Retrieve current user's profile
    PATCH: Update name, bio, profile picture or push token

    URL: /api/v1/users/profile/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="users_profile_retrieve",
        summary="Get current user's profile",
        tags=["Users"],
        responses={200: UserSerializer},
    )
    def get(self, request):
        return Response(UserSerializer(request.user).data)

    @extend_schema(
        operation_id="users_profile_update",
        summary="Update profile",
        description="Partial update of name, bio, profile picture URL and FCM device token.",
        tags=["Users"],
        request=ProfileUpdateSerializer,
        responses={200: UserSerializer},
    )
    def patch(self, request):
        serializer = ProfileUpdateSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        user = UserService.update_profile(request.user, **serializer.validated_data)
        return Response(UserSerializer(user).data)


class LanguageView(APIView):
    """
    API view for the preferred language.

    URL: /api/v1/users/language/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="users_language_update",
        summary="Set preferred language",
        tags=["Users"],
        request=LanguageSerializer,
        responses={200: LanguageSerializer},
    )
    def put(self, request):
        serializer = LanguageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = UserService.set_language(request.user, serializer.validated_data["language"])
        return Response({"language": user.language})


class ThemeView(APIView):
    """
    API view for the UI theme.

    URL: /api/v1/users/theme/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="users_theme_update",
        summary="Set UI theme",
        description="Accepts `light` or `dark`.",
        tags=["Users"],
        request=ThemeSerializer,
        responses={
            200: ThemeSerializer,
            400: OpenApiResponse(description="Invalid theme"),
        },
    )
    def put(self, request):
        serializer = ThemeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = UserService.set_theme(request.user, serializer.validated_data["theme"])
        if not result:
            return result_response(result)
        return Response({"theme": result.data.theme})


class StatsView(APIView):
    """
    API view for the current user's community stats.

    URL: /api/v1/users/stats/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="users_stats",
        summary="Get community stats",
        tags=["Users"],
        responses={200: UserStatsSerializer},
    )
    def get(self, request):
        return Response(UserService.get_stats(request.user))
