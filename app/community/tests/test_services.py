"""
Tests for community services.
"""

from datetime import timedelta

import pytest
from freezegun import freeze_time

from authentication.tests.factories import UserFactory
from community.models import Comment, Like, Post, Report
from community.services import EngagementService, ModerationService, PostService
from community.tests.factories import CommentFactory, PostFactory, ReportFactory


@pytest.mark.django_db
class TestPostService:

    def test_create_post_increments_author_counter(self, user):
        result = PostService.create_post(
            author=user,
            title="  Best seat on the 42X  ",
            content="Sit on the left for the river view.",
            category=Post.Category.ROUTES,
        )

        assert result.success
        assert result.data.title == "Best seat on the 42X"
        assert result.data.images == []
        user.refresh_from_db()
        assert user.posts_count == 1

    def test_unverified_author_rejected(self, unverified_user):
        result = PostService.create_post(
            author=unverified_user,
            title="Hello",
            content="World",
            category=Post.Category.TRAVEL_TIPS,
        )

        assert result.error_code == "EMAIL_NOT_VERIFIED"
        assert Post.objects.count() == 0

    def test_visible_posts_exclude_hidden_and_deleted(self):
        visible = PostFactory()
        PostFactory(is_hidden=True)
        PostFactory().soft_delete()

        assert list(PostService.visible_posts()) == [visible]

    def test_get_hidden_post_only_for_author_and_moderators(self, user, moderator):
        post = PostFactory(author=user, is_hidden=True)

        assert PostService.get_post(post.id, viewer=user).success
        assert PostService.get_post(post.id, viewer=moderator).success
        assert PostService.get_post(post.id).error_code == "POST_NOT_FOUND"

    def test_delete_by_author(self, user):
        post = PostService.create_post(
            author=user, title="Tip", content="Carry cash", category="travel-tips"
        ).data

        result = PostService.delete_post(user, post.id)

        assert result.success
        assert not Post.objects.filter(pk=post.id).exists()
        user.refresh_from_db()
        assert user.posts_count == 0

    def test_delete_by_admin(self, admin_user, post):
        assert PostService.delete_post(admin_user, post.id).success

    def test_delete_by_other_user_denied(self, user, post):
        result = PostService.delete_post(user, post.id)

        assert result.error_code == "PERMISSION_DENIED"
        assert Post.objects.filter(pk=post.id).exists()

    def test_trending_recomputes_and_orders(self):
        with freeze_time("2026-05-01 10:00:00") as frozen:
            old_popular = PostFactory(likes_count=10)
            frozen.tick(timedelta(hours=9))
            fresh = PostFactory(likes_count=2, comments_count=1)
            PostFactory(is_hidden=True, likes_count=50)
            frozen.tick(timedelta(hours=1))

            posts = PostService.trending()

        assert posts == [fresh, old_popular]
        old_popular.refresh_from_db()
        fresh.refresh_from_db()
        assert old_popular.trending_score == pytest.approx(2.0)
        assert fresh.trending_score == pytest.approx(5.0)

    def test_trending_returns_top_ten(self):
        PostFactory.create_batch(12)

        assert len(PostService.trending()) == 10


@pytest.mark.django_db
class TestLikes:

    def test_like_updates_counters_and_notifies(
        self, user, post, mock_notify, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True):
            result = EngagementService.like(user, post.id)

        assert result.data == 1
        post.author.refresh_from_db()
        assert post.author.likes_received == 1
        mock_notify.assert_called_once()
        kwargs = mock_notify.call_args.kwargs
        assert kwargs["user_id"] == post.author_id
        assert kwargs["notification_type"] == "post-like"
        assert kwargs["related_id"] == post.id
        assert kwargs["related_type"] == "post"

    def test_duplicate_like(self, user, post, mock_notify):
        EngagementService.like(user, post.id)

        result = EngagementService.like(user, post.id)

        assert result.error_code == "ALREADY_LIKED"
        post.refresh_from_db()
        assert post.likes_count == 1

    def test_own_post_like_does_not_notify(
        self, user, mock_notify, django_capture_on_commit_callbacks
    ):
        post = PostFactory(author=user)

        with django_capture_on_commit_callbacks(execute=True):
            EngagementService.like(user, post.id)

        mock_notify.assert_not_called()

    def test_unlike(self, user, post, mock_notify):
        EngagementService.like(user, post.id)

        result = EngagementService.unlike(user, post.id)

        assert result.data == 0
        assert not Like.objects.filter(post=post, user=user).exists()
        post.author.refresh_from_db()
        assert post.author.likes_received == 0

    def test_unlike_without_like(self, user, post):
        result = EngagementService.unlike(user, post.id)

        assert result.error_code == "NOT_LIKED"

    def test_like_deleted_post(self, user, post):
        post.soft_delete()

        assert EngagementService.like(user, post.id).error_code == "POST_NOT_FOUND"

    def test_hidden_post_cannot_be_liked(self, user, post, mock_notify):
        Post.objects.filter(pk=post.pk).update(is_hidden=True)

        result = EngagementService.like(user, post.id)

        assert result.error_code == "POST_NOT_FOUND"
        assert not Like.objects.filter(post=post).exists()
        post.refresh_from_db()
        assert post.likes_count == 0
        mock_notify.assert_not_called()

    def test_author_can_still_like_own_hidden_post(self, other_user, post):
        Post.objects.filter(pk=post.pk).update(is_hidden=True)

        assert EngagementService.like(other_user, post.id).data == 1


@pytest.mark.django_db
class TestComments:

    def test_add_comment(self, user, post, mock_notify, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            result = EngagementService.add_comment(user, post.id, "  Great tip!  ")

        assert result.data.content == "Great tip!"
        post.refresh_from_db()
        user.refresh_from_db()
        assert post.comments_count == 1
        assert user.comments_count == 1
        assert mock_notify.call_args.kwargs["notification_type"] == "post-comment"

    def test_blank_comment(self, user, post):
        result = EngagementService.add_comment(user, post.id, "   ")

        assert result.error_code == "VALIDATION_ERROR"

    def test_comment_on_deleted_post(self, user, post):
        post.soft_delete()

        result = EngagementService.add_comment(user, post.id, "Hello")

        assert result.error_code == "POST_NOT_FOUND"

    def test_list_comments_newest_first(self, post):
        first = CommentFactory(post=post)
        second = CommentFactory(post=post)
        CommentFactory(post=post).soft_delete()

        comments = list(EngagementService.list_comments(post.id).data)

        assert comments == [second, first]

    def test_hidden_post_rejects_comments(self, user, post, mock_notify):
        Post.objects.filter(pk=post.pk).update(is_hidden=True)

        result = EngagementService.add_comment(user, post.id, "Hello")

        assert result.error_code == "POST_NOT_FOUND"
        assert not Comment.objects.filter(post=post).exists()
        mock_notify.assert_not_called()

    def test_hidden_post_comments_only_for_author_and_moderators(
        self, user, other_user, moderator, post
    ):
        CommentFactory(post=post)
        Post.objects.filter(pk=post.pk).update(is_hidden=True)

        assert EngagementService.list_comments(post.id).error_code == "POST_NOT_FOUND"
        assert EngagementService.list_comments(post.id, viewer=user).error_code == "POST_NOT_FOUND"
        assert EngagementService.list_comments(post.id, viewer=other_user).data.count() == 1
        assert EngagementService.list_comments(post.id, viewer=moderator).data.count() == 1

    def test_delete_comment(self, user, post, mock_notify):
        comment = EngagementService.add_comment(user, post.id, "Hello").data

        assert EngagementService.delete_comment(user, comment.id).success

        assert not Comment.objects.filter(pk=comment.id).exists()
        post.refresh_from_db()
        assert post.comments_count == 0

    def test_delete_other_users_comment(self, user, post):
        comment = CommentFactory(post=post)

        result = EngagementService.delete_comment(user, comment.id)

        assert result.error_code == "PERMISSION_DENIED"


@pytest.mark.django_db
class TestModeration:

    def test_fifth_pending_report_hides_post(self, post):
        ReportFactory.create_batch(3, post=post)
        ReportFactory(post=post, status=Report.Status.DISMISSED)

        ModerationService.report_post(UserFactory(), post.id, Report.Reason.SPAM)
        post.refresh_from_db()
        assert post.is_hidden is False

        ModerationService.report_post(UserFactory(), post.id, Report.Reason.SPAM)
        post.refresh_from_db()
        assert post.is_hidden is True

    def test_duplicate_report(self, user, post):
        ModerationService.report_post(user, post.id, Report.Reason.OTHER, "Off topic")

        result = ModerationService.report_post(user, post.id, Report.Reason.SPAM)

        assert result.error_code == "ALREADY_REPORTED"
        post.refresh_from_db()
        assert post.reports_count == 1

    def test_dismiss_unhides_below_threshold(self, moderator, post):
        reports = ReportFactory.create_batch(5, post=post)
        Post.objects.filter(pk=post.pk).update(is_hidden=True)

        result = ModerationService.dismiss_report(moderator, reports[0].id)

        assert result.data.status == Report.Status.DISMISSED
        assert result.data.reviewed_by == moderator
        post.refresh_from_db()
        assert post.is_hidden is False

    def test_reviewed_report_hides_post(self, moderator, post):
        report = ReportFactory(post=post)

        ModerationService.mark_reviewed(moderator, report.id)

        post.refresh_from_db()
        assert post.is_hidden is True

    def test_resolved_report_cannot_be_resolved_again(self, moderator, post):
        report = ReportFactory(post=post, status=Report.Status.DISMISSED)

        result = ModerationService.mark_reviewed(moderator, report.id)

        assert result.error_code == "REPORT_RESOLVED"

    def test_reported_posts_most_reported_first(self, post):
        other = PostFactory()
        ReportFactory(post=other)
        ReportFactory.create_batch(2, post=post)
        PostFactory()

        posts = list(ModerationService.reported_posts())

        assert posts == [post, other]
        assert posts[0].matching_reports == 2
