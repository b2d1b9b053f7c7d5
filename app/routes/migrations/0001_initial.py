import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import routes.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Route",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("route_number", models.CharField(help_text="Public route number", max_length=20, unique=True)),
                ("name", models.CharField(max_length=200)),
                ("start_location", models.JSONField(blank=True, default=dict)),
                ("end_location", models.JSONField(blank=True, default=dict)),
                ("stops", models.JSONField(blank=True, default=list)),
                ("distance_km", models.FloatField(validators=[django.core.validators.MinValueValidator(0)])),
                ("average_duration_minutes", models.PositiveIntegerField()),
                (
                    "average_rating",
                    models.DecimalField(
                        decimal_places=1,
                        default=0,
                        max_digits=2,
                        validators=[
                            django.core.validators.MinValueValidator(0),
                            django.core.validators.MaxValueValidator(5),
                        ],
                    ),
                ),
                ("total_reviews", models.PositiveIntegerField(default=0)),
                ("rating_distribution", models.JSONField(default=routes.models.empty_rating_distribution)),
                ("is_active", models.BooleanField(db_index=True, default=True)),
            ],
            options={
                "db_table": "routes_route",
                "ordering": ["route_number"],
            },
        ),
        migrations.CreateModel(
            name="Journey",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("booking_id", models.CharField(help_text="Booking reference from the ticketing system", max_length=64)),
                ("scheduled_date", models.DateTimeField()),
                ("completed_date", models.DateTimeField(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("upcoming", "Upcoming"),
                            ("in-progress", "In progress"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        db_index=True,
                        default="upcoming",
                        max_length=20,
                    ),
                ),
                ("has_reviewed", models.BooleanField(default=False)),
                (
                    "route",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="journeys",
                        to="routes.route",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="journeys",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "routes_journey",
                "ordering": ["-scheduled_date"],
                "indexes": [
                    models.Index(fields=["user", "route", "scheduled_date"], name="routes_journey_user_route_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SavedRoute",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("name", models.CharField(max_length=100)),
                ("start_location", models.JSONField()),
                ("destination", models.JSONField()),
                ("waypoints", models.JSONField(blank=True, default=list)),
                ("distance_km", models.FloatField()),
                ("duration_minutes", models.FloatField()),
                ("traffic_info", models.JSONField(blank=True, default=dict)),
                ("polyline", models.TextField(blank=True, default="")),
                ("is_favorite", models.BooleanField(default=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="saved_routes",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "routes_saved_route",
                "indexes": [
                    models.Index(fields=["user", "-created_at"], name="routes_saved_user_created_idx"),
                ],
            },
        ),
    ]
