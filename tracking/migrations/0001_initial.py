import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Account",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("username", models.CharField(max_length=50, unique=True)),
                ("password", models.CharField(max_length=255)),
                ("email", models.CharField(blank=True, max_length=100, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
        ),
        migrations.CreateModel(
            name="Film",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("category", models.CharField(choices=[("MOVIES", "Movies")], default="MOVIES", max_length=16)),
                ("synopsis", models.TextField(blank=True, null=True)),
                ("runtime_minutes", models.PositiveIntegerField(blank=True, null=True)),
                ("release_year", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("genre", models.CharField(blank=True, default="", max_length=100)),
                ("director", models.CharField(blank=True, default="", max_length=150)),
                ("external_rating", models.DecimalField(blank=True, decimal_places=1, max_digits=2, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("external_rating__isnull", True), models.Q(("external_rating__gte", 1), ("external_rating__lte", 5)), _connector="OR"),
                        name="ck_film_external_rating_range",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProgressRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("status", models.CharField(choices=[("PLAN_TO_START", "Plan to Start"), ("IN_PROGRESS", "In Progress"), ("COMPLETED", "Completed")], default="PLAN_TO_START", max_length=16)),
                ("percent", models.PositiveSmallIntegerField(default=0)),
                ("rating", models.DecimalField(blank=True, decimal_places=1, max_digits=2, null=True)),
                ("notes", models.TextField(blank=True, null=True)),
                ("started_on", models.DateField(blank=True, null=True)),
                ("completed_on", models.DateField(blank=True, null=True)),
                ("last_updated", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("account", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="progress", to="tracking.account")),
                ("film", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="progress", to="tracking.film")),
            ],
            options={
                "indexes": [
                    models.Index(fields=["account", "last_updated"], name="idx_account_updated"),
                    models.Index(fields=["film", "last_updated"], name="idx_film_updated"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("account", "film"), name="uq_account_film"),
                    models.CheckConstraint(condition=models.Q(("percent__lte", 100)), name="ck_progress_percent_range"),
                    models.CheckConstraint(
                        condition=models.Q(("rating__isnull", True), models.Q(("rating__gte", 1), ("rating__lte", 5)), _connector="OR"),
                        name="ck_progress_rating_range",
                    ),
                ],
            },
        ),
    ]
