"""
Community service layer.

Services:
    PostService: Create, list, retrieve and delete posts; trending scores
    EngagementService: Likes and comments, with counters and notifications
    ModerationService: Reports, auto-hide and moderator decisions

Design Principles:
    - Counters are updated with F() expressions so concurrent likes and
      comments never lose increments
    - Notifications to post authors are queued on commit; a rolled-back
      like or comment never notifies anyone
    - Riders are never notified about their own activity
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Count, F, Q
from django.utils import timezone

from community.models import Comment, Like, Post, Report
from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from authentication.models import User
    from django.db.models import QuerySet

TRENDING_LIMIT = 10


def _notify(user_id: int, notification_type: str, title: str, message: str, post_id: int):
    from notifications.tasks import send_notification

    transaction.on_commit(
        partial(
            send_notification.delay,
            user_id=user_id,
            notification_type=notification_type,
            title=title,
            message=message,
            related_id=post_id,
            related_type="post",
        )
    )


def _bump(model, pk: int, **deltas: int) -> None:
    """Apply counter deltas with F(); decrements never go below zero."""
    qs = model.objects.filter(pk=pk)
    for field, delta in deltas.items():
        if delta < 0:
            qs = qs.filter(**{f"{field}__gte": -delta})
    qs.update(**{field: F(field) + delta for field, delta in deltas.items()})


class PostService(BaseService):
    """
    Post lifecycle business logic.

    Usage:
        result = PostService.create_post(
            author=request.user,
            title="Night bus to Da Lat",
            content="...",
            category=Post.Category.ROUTES,
        )
    """

    @staticmethod
    def visible_posts() -> QuerySet[Post]:
        """Posts shown in public listings: not deleted, not hidden."""
        return (
            Post.objects.filter(is_hidden=False)
            .select_related("author", "route")
            .order_by("-created_at", "-id")
        )

    @classmethod
    def create_post(
        cls,
        author: User,
        title: str,
        content: str,
        category: str,
        images: list[str] | None = None,
        route=None,
        destination: str = "",
    ) -> ServiceResult[Post]:
        """
        Create a post. Only verified users may post.

        Error codes:
            EMAIL_NOT_VERIFIED: Author has not verified their email
        """
        if not author.email_verified:
            return ServiceResult.failure(
                "Please verify your email address first",
                error_code="EMAIL_NOT_VERIFIED",
            )

        with cls.atomic():
            post = Post.objects.create(
                author=author,
                title=title.strip(),
                content=content,
                category=category,
                images=images or [],
                route=route,
                destination=destination or "",
            )
            _bump(get_user_model(), author.pk, posts_count=1)

        cls.get_logger().info(
            f"Post {post.id} created by user {author.id}",
            extra={"post_id": post.id, "category": category},
        )
        return ServiceResult.success(post)

    @staticmethod
    def get_post(post_id: int, viewer: User | None = None) -> ServiceResult[Post]:
        """
        A single post.

        Hidden posts are only visible to their author and moderators.
        """
        post = Post.objects.select_related("author", "route").filter(pk=post_id).first()
        if post is None:
            return ServiceResult.failure("Post not found", error_code="POST_NOT_FOUND")

        if post.is_hidden:
            can_see = viewer is not None and viewer.is_authenticated and (
                viewer.pk == post.author_id or viewer.is_moderator
            )
            if not can_see:
                return ServiceResult.failure("Post not found", error_code="POST_NOT_FOUND")

        return ServiceResult.success(post)

    @classmethod
    def delete_post(cls, user: User, post_id: int) -> ServiceResult[None]:
        """
        Soft delete a post. Author or admin only.

        Error codes:
            POST_NOT_FOUND: Missing or already deleted
            PERMISSION_DENIED: Not the author or an admin
        """
        post = Post.objects.filter(pk=post_id).first()
        if post is None:
            return ServiceResult.failure("Post not found", error_code="POST_NOT_FOUND")

        if post.author_id != user.pk and not user.is_admin:
            return ServiceResult.failure(
                "Not authorized to delete this post",
                error_code="PERMISSION_DENIED",
            )

        with cls.atomic():
            post.soft_delete()
            _bump(get_user_model(), post.author_id, posts_count=-1)

        cls.get_logger().info(
            f"Post {post.id} deleted by user {user.id}",
            extra={"post_id": post.id, "author_id": post.author_id},
        )
        return ServiceResult.success(None)

    @classmethod
    def trending(cls, limit: int = TRENDING_LIMIT) -> list[Post]:
        """
        Recompute and persist trending scores, then return the top posts.
        """
        now = timezone.now()
        posts = list(cls.visible_posts())
        for post in posts:
            post.trending_score = post.calculate_trending_score(now)

        Post.objects.bulk_update(posts, ["trending_score"], batch_size=500)

        posts.sort(key=lambda p: (p.trending_score, p.created_at), reverse=True)
        return posts[:limit]


class EngagementService(BaseService):
    """Likes and comments."""

    @classmethod
    def like(cls, user: User, post_id: int) -> ServiceResult[int]:
        """
        Like a post and credit its author.

        Returns:
            ServiceResult with the post's new likes_count

        Error codes:
            POST_NOT_FOUND: Missing, deleted, or hidden from the user
            ALREADY_LIKED: User already likes this post
        """
        found = PostService.get_post(post_id, viewer=user)
        if not found.success:
            return found
        post = found.data

        try:
            with cls.atomic():
                Like.objects.create(post=post, user=user)
                _bump(Post, post.pk, likes_count=1)
                _bump(get_user_model(), post.author_id, likes_received=1)
                if post.author_id != user.pk:
                    _notify(
                        post.author_id,
                        "post-like",
                        "New like",
                        f'{user.name} liked your post "{post.title}"',
                        post.pk,
                    )
        except IntegrityError:
            return ServiceResult.failure("Post already liked", error_code="ALREADY_LIKED")

        post.refresh_from_db(fields=["likes_count"])
        cls.get_logger().info(
            f"Post {post.id} liked by user {user.id}",
            extra={"post_id": post.id, "likes_count": post.likes_count},
        )
        return ServiceResult.success(post.likes_count)

    @classmethod
    def unlike(cls, user: User, post_id: int) -> ServiceResult[int]:
        """
        Remove a like.

        Error codes:
            POST_NOT_FOUND: Missing, deleted, or hidden from the user
            NOT_LIKED: User does not like this post
        """
        found = PostService.get_post(post_id, viewer=user)
        if not found.success:
            return found
        post = found.data

        with cls.atomic():
            deleted, _ = Like.objects.filter(post=post, user=user).delete()
            if not deleted:
                return ServiceResult.failure("Post is not liked", error_code="NOT_LIKED")
            _bump(Post, post.pk, likes_count=-1)
            _bump(get_user_model(), post.author_id, likes_received=-1)

        post.refresh_from_db(fields=["likes_count"])
        return ServiceResult.success(post.likes_count)

    @classmethod
    def add_comment(cls, user: User, post_id: int, content: str) -> ServiceResult[Comment]:
        """
        Comment on a post and notify its author.

        Error codes:
            POST_NOT_FOUND: Missing, deleted, or hidden from the user
            VALIDATION_ERROR: Blank content
        """
        invalid = cls.validate_required(content=content)
        if invalid is not None:
            return invalid

        found = PostService.get_post(post_id, viewer=user)
        if not found.success:
            return found
        post = found.data

        with cls.atomic():
            comment = Comment.objects.create(post=post, author=user, content=content.strip())
            _bump(Post, post.pk, comments_count=1)
            _bump(get_user_model(), user.pk, comments_count=1)
            if post.author_id != user.pk:
                _notify(
                    post.author_id,
                    "post-comment",
                    "New comment",
                    f'{user.name} commented on your post "{post.title}"',
                    post.pk,
                )

        cls.get_logger().info(
            f"Comment {comment.id} added to post {post.id}",
            extra={"post_id": post.id, "user_id": user.id},
        )
        return ServiceResult.success(comment)

    @staticmethod
    def list_comments(post_id: int, viewer: User | None = None) -> ServiceResult[QuerySet[Comment]]:
        """Comments on a post the viewer can see, newest first."""
        found = PostService.get_post(post_id, viewer=viewer)
        if not found.success:
            return found

        comments = (
            Comment.objects.filter(post_id=post_id)
            .select_related("author")
            .order_by("-created_at", "-id")
        )
        return ServiceResult.success(comments)

    @classmethod
    def delete_comment(cls, user: User, comment_id: int) -> ServiceResult[None]:
        """
        Soft delete a comment. Author or admin only.

        Error codes:
            COMMENT_NOT_FOUND: Missing or already deleted
            PERMISSION_DENIED: Not the author or an admin
        """
        comment = Comment.objects.filter(pk=comment_id).first()
        if comment is None:
            return ServiceResult.failure("Comment not found", error_code="COMMENT_NOT_FOUND")

        if comment.author_id != user.pk and not user.is_admin:
            return ServiceResult.failure(
                "Not authorized to delete this comment",
                error_code="PERMISSION_DENIED",
            )

        with cls.atomic():
            comment.soft_delete()
            _bump(Post, comment.post_id, comments_count=-1)
            _bump(get_user_model(), comment.author_id, comments_count=-1)

        return ServiceResult.success(None)


class ModerationService(BaseService):
    """
    Reports and moderator decisions.

    A post with POST_AUTO_HIDE_REPORT_THRESHOLD or more pending reports is
    hidden. Dismissing reports can bring it back below the threshold,
    which un-hides it; marking a report reviewed upholds the hide.
    """

    @staticmethod
    def pending_reports(post: Post) -> int:
        return Report.objects.filter(post=post, status=Report.Status.PENDING).count()

    @classmethod
    def report_post(
        cls,
        user: User,
        post_id: int,
        reason: str,
        description: str = "",
    ) -> ServiceResult[Report]:
        """
        Report a post.

        Error codes:
            POST_NOT_FOUND: Missing, deleted, or hidden from the user
            ALREADY_REPORTED: User already reported this post
        """
        post = Post.objects.filter(pk=post_id).first()
        if post is None:
            return ServiceResult.failure("Post not found", error_code="POST_NOT_FOUND")

        try:
            with cls.atomic():
                report = Report.objects.create(
                    post=post,
                    reporter=user,
                    reason=reason,
                    description=description or "",
                )
                _bump(Post, post.pk, reports_count=1)

                pending = cls.pending_reports(post)
                if pending >= settings.POST_AUTO_HIDE_REPORT_THRESHOLD and not post.is_hidden:
                    Post.objects.filter(pk=post.pk).update(is_hidden=True)
                    cls.get_logger().warning(
                        f"Post {post.id} auto-hidden after {pending} pending reports",
                        extra={"post_id": post.id, "pending_reports": pending},
                    )
        except IntegrityError:
            return ServiceResult.failure(
                "You have already reported this post",
                error_code="ALREADY_REPORTED",
            )

        return ServiceResult.success(report)

    @staticmethod
    def reported_posts(status: str = Report.Status.PENDING) -> QuerySet[Post]:
        """Posts with reports in the given status, most reported first."""
        return (
            Post.objects.annotate(
                matching_reports=Count("reports", filter=Q(reports__status=status))
            )
            .filter(matching_reports__gt=0)
            .select_related("author")
            .order_by("-matching_reports", "-created_at")
        )

    @classmethod
    def dismiss_report(cls, moderator: User, report_id: int) -> ServiceResult[Report]:
        """Reject a report; un-hide the post if it drops below the threshold."""
        return cls._resolve(moderator, report_id, Report.Status.DISMISSED)

    @classmethod
    def mark_reviewed(cls, moderator: User, report_id: int) -> ServiceResult[Report]:
        """Uphold a report. The post is hidden regardless of the report count."""
        return cls._resolve(moderator, report_id, Report.Status.REVIEWED)

    @classmethod
    def _resolve(cls, moderator: User, report_id: int, status: str) -> ServiceResult[Report]:
        report = Report.objects.select_related("post").filter(pk=report_id).first()
        if report is None:
            return ServiceResult.failure("Report not found", error_code="NOT_FOUND")
        if report.status != Report.Status.PENDING:
            return ServiceResult.failure(
                "Report has already been resolved",
                error_code="REPORT_RESOLVED",
            )

        with cls.atomic():
            report.status = status
            report.reviewed_by = moderator
            report.reviewed_at = timezone.now()
            report.save(update_fields=["status", "reviewed_by", "reviewed_at", "updated_at"])

            post = report.post
            if status == Report.Status.REVIEWED:
                hidden = True
            else:
                hidden = post.is_hidden and (
                    cls.pending_reports(post) >= settings.POST_AUTO_HIDE_REPORT_THRESHOLD
                    or post.reports.filter(status=Report.Status.REVIEWED).exists()
                )
            if hidden != post.is_hidden:
                post.is_hidden = hidden
                post.save(update_fields=["is_hidden", "updated_at"])

        cls.get_logger().info(
            f"Report {report.id} {status} by moderator {moderator.id}",
            extra={"post_id": post.id, "is_hidden": post.is_hidden},
        )
        return ServiceResult.success(report)
