"""
Community models.

This module defines:
- Post: A travel post by a verified rider
- Like: One rider liking one post
- Comment: A comment on a post
- Report: A rider flagging a post for moderation

Design Decisions:
    - Posts and comments are soft deleted; the default manager hides them
    - likes_count / comments_count / reports_count are denormalized and
      updated with F() expressions by the services
    - trending_score is persisted so listings can sort on it
    - A post is auto-hidden once it has POST_AUTO_HIDE_REPORT_THRESHOLD
      pending reports
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone

from core.managers import SoftDeleteManager
from core.model_mixins import SoftDeleteMixin
from core.models import BaseModel


class Post(SoftDeleteMixin, BaseModel):
    """
    A community post.

    Fields:
        author: Verified user who wrote the post
        title / content: Post text (title <= 200, content <= 5000)
        images: List of image URLs
        category: routes, destinations or travel-tips
        route: Bus route the post is about (optional)
        destination: Destination name for destination posts
        likes_count / comments_count / reports_count: Denormalized counters
        is_hidden: Hidden from listings by moderation
        trending_score: (likes * 2 + comments) / hours since creation
    """

    class Category(models.TextChoices):
        ROUTES = "routes", "Routes"
        DESTINATIONS = "destinations", "Destinations"
        TRAVEL_TIPS = "travel-tips", "Travel tips"

    objects = SoftDeleteManager()
    all_objects = models.Manager()

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="posts",
    )
    title = models.CharField(max_length=200)
    content = models.TextField(max_length=5000)
    images = models.JSONField(default=list, blank=True)
    category = models.CharField(max_length=20, choices=Category.choices)
    route = models.ForeignKey(
        "routes.Route",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="posts",
    )
    destination = models.CharField(max_length=200, blank=True, default="")

    likes_count = models.PositiveIntegerField(default=0)
    comments_count = models.PositiveIntegerField(default=0)
    reports_count = models.PositiveIntegerField(default=0)
    is_hidden = models.BooleanField(default=False, db_index=True)
    trending_score = models.FloatField(default=0)

    class Meta:
        db_table = "community_post"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-trending_score", "-created_at"], name="post_trending_idx"),
            models.Index(fields=["category", "-created_at"], name="post_category_idx"),
        ]

    def __str__(self):
        return self.title

    def calculate_trending_score(self, now=None) -> float:
        """
        Engagement per hour since the post was created.

        Posts less than an instant old score their raw engagement.
        """
        now = now or timezone.now()
        engagement = self.likes_count * 2 + self.comments_count
        hours = (now - self.created_at).total_seconds() / 3600
        if hours <= 0:
            return float(engagement)
        return engagement / hours


class Like(BaseModel):
    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name="likes")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="post_likes",
    )

    class Meta:
        db_table = "community_like"
        constraints = [
            models.UniqueConstraint(fields=["post", "user"], name="uniq_post_like"),
        ]

    def __str__(self):
        return f"{self.user_id} likes {self.post_id}"


class Comment(SoftDeleteMixin, BaseModel):
    """A comment on a post. Content is stored trimmed."""

    objects = SoftDeleteManager()
    all_objects = models.Manager()

    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name="comments")
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="comments",
    )
    content = models.TextField(max_length=1000)

    class Meta:
        db_table = "community_comment"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["post", "-created_at"], name="comment_post_created_idx"),
        ]

    def __str__(self):
        return f"Comment {self.pk} on {self.post_id}"


class Report(BaseModel):
    """
    A report against a post.

    State Flow:
        PENDING -> REVIEWED (moderator upheld it, post stays hidden)
        PENDING -> DISMISSED (moderator rejected it)
    """

    class Reason(models.TextChoices):
        SPAM = "spam", "Spam"
        INAPPROPRIATE = "inappropriate", "Inappropriate"
        HARASSMENT = "harassment", "Harassment"
        FALSE_INFORMATION = "false-information", "False information"
        OTHER = "other", "Other"

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        REVIEWED = "reviewed", "Reviewed"
        DISMISSED = "dismissed", "Dismissed"

    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name="reports")
    reporter = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="post_reports",
    )
    reason = models.CharField(max_length=20, choices=Reason.choices)
    description = models.TextField(max_length=500, blank=True, default="")
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "community_report"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["post", "reporter"], name="uniq_post_reporter"),
        ]

    def __str__(self):
        return f"{self.reason} report on {self.post_id} ({self.status})"
