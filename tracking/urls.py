from django.urls import path
from .views import (
    AccountProgressView,
    AccountSummaryView,
    FilmDetailView,
    FilmListView,
    FilmStatsView,
    ProgressDetailView,
)

urlpatterns = [
    path("films", FilmListView.as_view(), name="film-list"),
    path("films/<int:film_id>", FilmDetailView.as_view(), name="film-detail"),
    path("films/<int:film_id>/stats", FilmStatsView.as_view(), name="film-stats"),
    path("accounts/<int:account_id>/progress", AccountProgressView.as_view(), name="account-progress"),
    path("accounts/<int:account_id>/summary", AccountSummaryView.as_view(), name="account-summary"),
    path("progress/<int:progress_id>", ProgressDetailView.as_view(), name="progress-detail"),
]
