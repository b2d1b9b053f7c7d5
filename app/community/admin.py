"""
Django admin configuration for the community app.
"""

from django.contrib import admin

from community.models import Comment, Like, Post, Report


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "author",
        "category",
        "likes_count",
        "comments_count",
        "reports_count",
        "is_hidden",
        "is_deleted",
        "created_at",
    )
    list_filter = ("category", "is_hidden", "is_deleted")
    search_fields = ("title", "author__email")
    raw_id_fields = ("author", "route")
    readonly_fields = ("likes_count", "comments_count", "reports_count", "trending_score")

    def get_queryset(self, request):
        return Post.all_objects.select_related("author")


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ("id", "post", "author", "is_deleted", "created_at")
    list_filter = ("is_deleted",)
    raw_id_fields = ("post", "author")

    def get_queryset(self, request):
        return Comment.all_objects.select_related("author")


@admin.register(Report)
class ReportAdmin(admin.ModelAdmin):
    list_display = ("post", "reporter", "reason", "status", "created_at")
    list_filter = ("status", "reason")
    raw_id_fields = ("post", "reporter", "reviewed_by")


admin.site.register(Like)
