# tracking/views.py
from __future__ import annotations

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from . import progress
from .errors import DuplicateTrackingError, NotFoundError, ValidationError
from .serializers import (
    AccountSummarySerializer,
    FilmSerializer,
    FilmStatsSerializer,
    ProgressRecordSerializer,
    ProgressUpdateSerializer,
    TrackFilmSerializer,
)
from .store import TrackingStore


class TrackerAPIView(APIView):
    """Base view: holds the store and maps tracker errors onto HTTP responses."""
    store_class = TrackingStore

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        self.store = self.store_class()

    def handle_exception(self, exc):
        if isinstance(exc, NotFoundError):
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        if isinstance(exc, DuplicateTrackingError):
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        if isinstance(exc, ValidationError):
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return super().handle_exception(exc)


class FilmListView(TrackerAPIView):
    """GET /api/films"""
    def get(self, request):
        return Response(FilmSerializer(self.store.list_films(), many=True).data)


class FilmDetailView(TrackerAPIView):
    """GET /api/films/{film_id}"""
    def get(self, request, film_id: int):
        return Response(FilmSerializer(self.store.get_film(film_id)).data)


class FilmStatsView(TrackerAPIView):
    """GET /api/films/{film_id}/stats"""
    def get(self, request, film_id: int):
        stats = self.store.film_stats(film_id)
        return Response({
            "film_id": film_id,
            **FilmStatsSerializer(stats.as_dict()).data,
        })


class AccountProgressView(TrackerAPIView):
    """
    GET  /api/accounts/{account_id}/progress[?status=IN_PROGRESS]
    POST /api/accounts/{account_id}/progress   (201, 409 if already tracked)
    """
    def get(self, request, account_id: int):
        records = self.store.records_for_account(account_id, status=request.query_params.get("status"))
        return Response(ProgressRecordSerializer(records, many=True).data)

    def post(self, request, account_id: int):
        body = TrackFilmSerializer(data=request.data or {})
        body.is_valid(raise_exception=True)
        data = body.validated_data
        record = self.store.track_film(
            account_id,
            data["film_id"],
            data["status"],
            rating=data.get("rating"),
            notes=data.get("notes"),
        )
        record = self.store.get_progress(record.id)
        return Response(ProgressRecordSerializer(record).data, status=status.HTTP_201_CREATED)


class AccountSummaryView(TrackerAPIView):
    """GET /api/accounts/{account_id}/summary"""
    def get(self, request, account_id: int):
        summary = self.store.account_summary(account_id)
        return Response({
            "account_id": account_id,
            **AccountSummarySerializer(summary.as_dict()).data,
        })


class ProgressDetailView(TrackerAPIView):
    """
    GET    /api/progress/{progress_id}
    PATCH  /api/progress/{progress_id}   any of status, percent, rating, notes
    DELETE /api/progress/{progress_id}
    """
    def get(self, request, progress_id: int):
        return Response(ProgressRecordSerializer(self.store.get_progress(progress_id)).data)

    def patch(self, request, progress_id: int):
        body = ProgressUpdateSerializer(data=request.data or {})
        body.is_valid(raise_exception=True)
        data = body.validated_data

        # Applied in memory and saved only if every step passes, so a bad
        # rating does not persist a status change made before it.
        record = self.store.get_progress(progress_id)
        if "status" in data:
            progress.set_status(record, data["status"])
        if "percent" in data:
            progress.set_percent(record, data["percent"])
        if "rating" in data:
            progress.set_rating(record, data["rating"])
        if "notes" in data:
            progress.set_notes(record, data["notes"])
        self.store.save_progress(record)
        return Response(ProgressRecordSerializer(record).data)

    def delete(self, request, progress_id: int):
        self.store.untrack(progress_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
