"""
URL configuration for authentication app.

URL structure:
    /api/v1/auth/register/        - Registration (returns JWT pair)
    /api/v1/auth/login/           - Email/password login
    /api/v1/auth/token/refresh/   - Refresh access token
    /api/v1/auth/logout/          - Blacklist refresh token
    /api/v1/auth/verify-email/    - Email verification
    /api/v1/auth/resend-email/    - Resend verification email
    /api/v1/auth/me/              - Current user

    /api/v1/users/profile/        - Profile (GET/PATCH)
    /api/v1/users/language/       - Preferred language (PUT)
    /api/v1/users/theme/          - UI theme (PUT)
    /api/v1/users/stats/          - Community stats (GET)
"""

from django.urls import include, path
from rest_framework_simplejwt.views import TokenBlacklistView, TokenRefreshView

from authentication.views import (
    EmailVerificationView,
    LanguageView,
    LoginView,
    MeView,
    ProfileView,
    RegisterView,
    ResendEmailView,
    StatsView,
    ThemeView,
)

app_name = "authentication"

auth_urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("logout/", TokenBlacklistView.as_view(), name="logout"),
    path("verify-email/", EmailVerificationView.as_view(), name="verify-email"),
    path("resend-email/", ResendEmailView.as_view(), name="resend-email"),
    path("me/", MeView.as_view(), name="me"),
]

user_urlpatterns = [
    path("profile/", ProfileView.as_view(), name="profile"),
    path("language/", LanguageView.as_view(), name="language"),
    path("theme/", ThemeView.as_view(), name="theme"),
    path("stats/", StatsView.as_view(), name="stats"),
]

urlpatterns = [
    path("auth/", include(auth_urlpatterns)),
    path("users/", include(user_urlpatterns)),
]
