"""
Managers for soft-deleted models.

Usage:
    from core.managers import SoftDeleteManager

    class Post(SoftDeleteMixin, BaseModel):
        objects = SoftDeleteManager()   # live posts only
        all_objects = models.Manager()  # including deleted, for admin and moderation

    Post.objects.filter(author=user)
    Post.objects.deleted()
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone


class SoftDeleteQuerySet(models.QuerySet):
    """QuerySet whose delete() marks rows deleted instead of removing them."""

    def delete(self) -> tuple[int, dict[str, int]]:
        count = self.filter(is_deleted=False).update(
            is_deleted=True,
            deleted_at=timezone.now(),
        )
        return count, {self.model._meta.label: count}

    def hard_delete(self) -> tuple[int, dict[str, int]]:
        return super().delete()

    def restore(self) -> int:
        return self.filter(is_deleted=True).update(is_deleted=False, deleted_at=None)


class SoftDeleteManager(models.Manager):
    """Default manager hiding soft-deleted rows."""

    def get_queryset(self) -> SoftDeleteQuerySet:
        return SoftDeleteQuerySet(self.model, using=self._db).filter(is_deleted=False)

    def deleted(self) -> SoftDeleteQuerySet:
        return SoftDeleteQuerySet(self.model, using=self._db).filter(is_deleted=True)
