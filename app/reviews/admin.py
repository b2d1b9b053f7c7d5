"""
Django admin configuration for route reviews.
"""

from django.contrib import admin

from reviews.models import Review, ReviewEdit, ReviewReport
from reviews.services import RouteStatsService


class ReviewEditInline(admin.TabularInline):
    model = ReviewEdit
    extra = 0
    readonly_fields = ("previous_rating", "previous_content", "created_at")
    can_delete = False


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "route",
        "user",
        "rating",
        "upvotes_count",
        "reports_count",
        "is_hidden",
        "is_trusted_reviewer",
        "can_edit",
        "created_at",
    )
    list_filter = ("is_hidden", "is_trusted_reviewer", "can_edit", "rating")
    search_fields = ("content", "user__email", "route__route_number")
    raw_id_fields = ("user", "route", "journey")
    readonly_fields = ("upvotes_count", "reports_count", "editable_until", "locked_at")
    inlines = [ReviewEditInline]
    actions = ["unhide_reviews"]

    @admin.action(description="Unhide selected reviews")
    def unhide_reviews(self, request, queryset):
        route_ids = set(queryset.filter(is_hidden=True).values_list("route_id", flat=True))
        count = queryset.update(is_hidden=False)
        for route_id in route_ids:
            RouteStatsService.recompute(route_id)
        self.message_user(request, f"{count} reviews unhidden")


@admin.register(ReviewReport)
class ReviewReportAdmin(admin.ModelAdmin):
    list_display = ("review", "reporter", "reason", "status", "created_at")
    list_filter = ("status", "reason")
    raw_id_fields = ("review", "reporter")
