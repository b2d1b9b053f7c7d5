"""
Account-level permission classes shared by every app.

- IsVerified: email address confirmed (required to post, comment, review)
- IsAdminRole: admin role or Django staff
- IsModeratorRole: moderator or admin, for report handling

Design Decisions:
    - Role checks read User.is_admin / User.is_moderator so staff accounts
      created through createsuperuser behave as admins
    - Permission classes are composable via DRF's AND logic
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework import permissions

if TYPE_CHECKING:
    from rest_framework.request import Request
    from rest_framework.views import APIView


class IsVerified(permissions.BasePermission):
    """Allows access only to users who verified their email address."""

    message = "Please verify your email address first."

    def has_permission(self, request: Request, view: APIView) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and user.email_verified)


class IsAdminRole(permissions.BasePermission):
    """Allows access only to admins."""

    message = "Admin access required."

    def has_permission(self, request: Request, view: APIView) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin)


class IsModeratorRole(permissions.BasePermission):
    """Allows access to moderators and admins."""

    message = "Moderator access required."

    def has_permission(self, request: Request, view: APIView) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and user.is_moderator)
