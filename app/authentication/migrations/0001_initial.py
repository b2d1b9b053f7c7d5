import authentication.managers
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                (
                    "is_superuser",
                    models.BooleanField(
                        default=False,
                        help_text="Designates that this user has all permissions without explicitly assigning them.",
                        verbose_name="superuser status",
                    ),
                ),
                ("email", models.EmailField(db_index=True, help_text="User's email address (primary identifier)", max_length=254, unique=True)),
                ("name", models.CharField(blank=True, default="", help_text="Display name", max_length=100)),
                ("email_verified", models.BooleanField(default=False, help_text="Whether the user's email has been verified")),
                (
                    "role",
                    models.CharField(
                        choices=[("user", "User"), ("moderator", "Moderator"), ("admin", "Admin")],
                        db_index=True,
                        default="user",
                        help_text="Account role",
                        max_length=20,
                    ),
                ),
                ("language", models.CharField(default="en", help_text="Preferred language code", max_length=10)),
                (
                    "theme",
                    models.CharField(
                        choices=[("light", "Light"), ("dark", "Dark")],
                        default="light",
                        help_text="Preferred UI theme",
                        max_length=10,
                    ),
                ),
                ("profile_picture", models.URLField(blank=True, default="", help_text="Avatar image URL", max_length=500)),
                ("bio", models.TextField(blank=True, default="", help_text="Short bio (max 500 characters)", max_length=500)),
                (
                    "fcm_token",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Firebase Cloud Messaging device token (empty disables push)",
                        max_length=255,
                    ),
                ),
                ("posts_count", models.PositiveIntegerField(default=0, help_text="Number of posts authored")),
                ("comments_count", models.PositiveIntegerField(default=0, help_text="Number of comments written")),
                ("likes_received", models.PositiveIntegerField(default=0, help_text="Likes received across all posts")),
                (
                    "is_active",
                    models.BooleanField(
                        default=True,
                        help_text="Whether this user account is active. Deselect instead of deleting.",
                    ),
                ),
                ("is_staff", models.BooleanField(default=False, help_text="Whether the user can access the admin site.")),
                ("date_joined", models.DateTimeField(auto_now_add=True, help_text="When the user account was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="When the user record was last modified")),
                (
                    "groups",
                    models.ManyToManyField(
                        blank=True,
                        help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.group",
                        verbose_name="groups",
                    ),
                ),
                (
                    "user_permissions",
                    models.ManyToManyField(
                        blank=True,
                        help_text="Specific permissions for this user.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.permission",
                        verbose_name="user permissions",
                    ),
                ),
            ],
            options={
                "verbose_name": "user",
                "verbose_name_plural": "users",
                "db_table": "authentication_user",
                "ordering": ["-date_joined"],
            },
            managers=[
                ("objects", authentication.managers.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name="EmailVerificationToken",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("token", models.CharField(db_index=True, help_text="Unique verification token", max_length=64, unique=True)),
                ("expires_at", models.DateTimeField(db_index=True, help_text="When this token expires")),
                ("used_at", models.DateTimeField(blank=True, help_text="When this token was used (null if unused)", null=True)),
                (
                    "user",
                    models.ForeignKey(
                        help_text="User this token belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="verification_tokens",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "email verification token",
                "verbose_name_plural": "email verification tokens",
                "db_table": "authentication_email_verification_token",
                "indexes": [models.Index(fields=["user", "used_at"], name="auth_token_user_used_idx")],
            },
        ),
    ]
