"""
Django admin configuration for routes.
"""

from django.contrib import admin

from routes.models import Journey, Route, SavedRoute


@admin.register(Route)
class RouteAdmin(admin.ModelAdmin):
    list_display = (
        "route_number",
        "name",
        "distance_km",
        "average_duration_minutes",
        "average_rating",
        "total_reviews",
        "is_active",
    )
    list_filter = ("is_active",)
    search_fields = ("route_number", "name")
    readonly_fields = ("average_rating", "total_reviews", "rating_distribution")


@admin.register(Journey)
class JourneyAdmin(admin.ModelAdmin):
    list_display = ("booking_id", "user", "route", "status", "scheduled_date", "has_reviewed")
    list_filter = ("status", "has_reviewed")
    search_fields = ("booking_id", "user__email", "route__route_number")
    raw_id_fields = ("user", "route")


@admin.register(SavedRoute)
class SavedRouteAdmin(admin.ModelAdmin):
    list_display = ("name", "user", "distance_km", "duration_minutes", "is_favorite", "created_at")
    search_fields = ("name", "user__email")
    raw_id_fields = ("user",)
