from django.db import models
from django.utils import timezone


class Status(models.TextChoices):
    PLAN_TO_START = "PLAN_TO_START", "Plan to Start"
    IN_PROGRESS = "IN_PROGRESS", "In Progress"
    COMPLETED = "COMPLETED", "Completed"


class Account(models.Model):
    username = models.CharField(max_length=50, unique=True)
    password = models.CharField(max_length=255)                     # Django password hash
    email = models.CharField(max_length=100, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.username


class Film(models.Model):
    class Category(models.TextChoices):
        MOVIES = "MOVIES", "Movies"

    title = models.CharField(max_length=255)
    category = models.CharField(max_length=16, choices=Category.choices, default=Category.MOVIES)
    synopsis = models.TextField(null=True, blank=True)
    runtime_minutes = models.PositiveIntegerField(null=True, blank=True)
    release_year = models.PositiveSmallIntegerField(null=True, blank=True)
    genre = models.CharField(max_length=100, blank=True, default="")
    director = models.CharField(max_length=150, blank=True, default="")
    external_rating = models.DecimalField(max_digits=2, decimal_places=1, null=True, blank=True)  # e.g. Letterboxd average
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(external_rating__isnull=True)
                | models.Q(external_rating__gte=1, external_rating__lte=5),
                name="ck_film_external_rating_range",
            ),
        ]

    def __str__(self):
        if self.release_year:
            return f"{self.title} ({self.release_year})"
        return self.title


class ProgressRecord(models.Model):
    account = models.ForeignKey(Account, on_delete=models.CASCADE, related_name="progress")
    film = models.ForeignKey(Film, on_delete=models.CASCADE, related_name="progress")
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PLAN_TO_START)
    percent = models.PositiveSmallIntegerField(default=0)              # 0..100
    rating = models.DecimalField(max_digits=2, decimal_places=1, null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    started_on = models.DateField(null=True, blank=True)
    completed_on = models.DateField(null=True, blank=True)
    last_updated = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["account", "film"], name="uq_account_film"),
            models.CheckConstraint(condition=models.Q(percent__lte=100), name="ck_progress_percent_range"),
            models.CheckConstraint(
                condition=models.Q(rating__isnull=True) | models.Q(rating__gte=1, rating__lte=5),
                name="ck_progress_rating_range",
            ),
        ]
        indexes = [
            models.Index(fields=["account", "last_updated"], name="idx_account_updated"),
            models.Index(fields=["film", "last_updated"], name="idx_film_updated"),
        ]

    def __str__(self):
        return f"ProgressRecord(account={self.account_id}, film={self.film_id}, {self.status}, {self.percent}%)"
