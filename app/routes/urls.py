"""
URL configuration for routes.

Mounted at /api/v1/routes/.
"""

from django.urls import path

from routes import views

app_name = "routes"

urlpatterns = [
    path("", views.RouteListView.as_view(), name="route-list"),
    path("<int:route_id>/", views.RouteDetailView.as_view(), name="route-detail"),
    path("plan/", views.PlanRouteView.as_view(), name="plan"),
    path("compare/", views.CompareRoutesView.as_view(), name="compare"),
    path("saved/", views.SavedRouteListView.as_view(), name="saved-list"),
    path(
        "saved/<int:saved_route_id>/",
        views.SavedRouteDetailView.as_view(),
        name="saved-detail",
    ),
    path("journeys/", views.JourneyListView.as_view(), name="journey-list"),
    path(
        "journeys/<int:journey_id>/complete/",
        views.CompleteJourneyView.as_view(),
        name="journey-complete",
    ),
]
