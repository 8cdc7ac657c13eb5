# tracking/serializers.py
import datetime as dt

from django.utils import timezone
from rest_framework import serializers

from .models import Film, ProgressRecord, Status


class AwareDateTimeField(serializers.DateTimeField):
    """Always output ISO in UTC; naive values are taken as UTC."""
    def to_representation(self, value):
        if value is None:
            return None
        if timezone.is_naive(value):
            value = timezone.make_aware(value, dt.timezone.utc)
        return super().to_representation(value.astimezone(dt.timezone.utc))


class FilmSerializer(serializers.ModelSerializer):
    external_rating = serializers.DecimalField(max_digits=2, decimal_places=1, coerce_to_string=False,
                                               allow_null=True, read_only=True)

    class Meta:
        model = Film
        fields = (
            "id",
            "title",
            "category",
            "synopsis",
            "runtime_minutes",
            "release_year",
            "genre",
            "director",
            "external_rating",
        )
        read_only_fields = fields


class ProgressRecordSerializer(serializers.ModelSerializer):
    """Read-only snapshot of a record with the film title for display."""
    account_id = serializers.IntegerField(read_only=True)
    film_id = serializers.IntegerField(read_only=True)
    film_title = serializers.CharField(source="film.title", read_only=True)
    rating = serializers.DecimalField(max_digits=2, decimal_places=1, coerce_to_string=False,
                                      allow_null=True, read_only=True)
    last_updated = AwareDateTimeField(read_only=True)

    class Meta:
        model = ProgressRecord
        fields = (
            "id",
            "account_id",
            "film_id",
            "film_title",
            "status",
            "percent",
            "rating",
            "notes",
            "started_on",
            "completed_on",
            "last_updated",
        )
        read_only_fields = fields


class TrackFilmSerializer(serializers.Serializer):
    """
    Input shape for starting to track a film. Only types and presence are
    checked here; range rules live in tracking.progress so the console and
    the API reject the same values.
    """
    film_id = serializers.IntegerField()
    status = serializers.CharField(required=False, default=Status.PLAN_TO_START.value)
    rating = serializers.DecimalField(max_digits=4, decimal_places=2, required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class ProgressUpdateSerializer(serializers.Serializer):
    status = serializers.CharField(required=False)
    percent = serializers.IntegerField(required=False)
    rating = serializers.DecimalField(max_digits=4, decimal_places=2, required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("nothing to update.")
        return attrs


class AccountSummarySerializer(serializers.Serializer):
    total = serializers.IntegerField()
    plan_to_start = serializers.IntegerField()
    in_progress = serializers.IntegerField()
    completed = serializers.IntegerField()
    completion_rate = serializers.FloatField()


class FilmStatsSerializer(serializers.Serializer):
    total_trackers = serializers.IntegerField()
    plan_to_start = serializers.IntegerField()
    in_progress = serializers.IntegerField()
    completed = serializers.IntegerField()
    rated = serializers.IntegerField()
    average_rating = serializers.FloatField()
