import io
from decimal import Decimal

import pytest
from django.core.management import call_command

from tracking.console import TrackerConsole, truncate
from tracking.models import Account, ProgressRecord, Status


def run(store, *lines):
    out = io.StringIO()
    console = TrackerConsole(store, stdin=io.StringIO("".join(f"{l}\n" for l in lines)), stdout=out)
    console.run()
    return out.getvalue()


LOGIN = ("1", "john_doe", "password123")


def test_truncate():
    assert truncate("Short", 10) == "Short"
    assert truncate("2001: A Space Odyssey", 10) == "2001: A..."
    assert truncate(None, 5) == ""


@pytest.mark.django_db
def test_register_then_login_then_exit(store):
    out = run(store, "2", "trinity", "followthewhiterabbit", "trin@zion.org", "1", "trinity", "followthewhiterabbit", "8")
    assert "Account created successfully" in out
    assert "Welcome back, trinity!" in out
    assert out.rstrip().endswith("Goodbye!")
    assert Account.objects.filter(username="trinity").exists()


@pytest.mark.django_db
def test_register_short_password_is_reported(store):
    out = run(store, "2", "tank", "abc", "", "3")
    assert "Registration failed" in out
    assert not Account.objects.filter(username="tank").exists()


@pytest.mark.django_db
def test_bad_login(store, account):
    out = run(store, "1", "john_doe", "wrong", "3")
    assert "Invalid username or password." in out


@pytest.mark.django_db
def test_end_of_input_exits_cleanly(store, account):
    out = run(store, *LOGIN)
    assert "Goodbye!" in out


@pytest.mark.django_db
def test_add_film_completed_with_rating(store, account, film):
    out = run(store, *LOGIN, "3", str(film.id), "3", "4.5", "8")
    assert "'Arrival' added to your tracking list!" in out
    rec = ProgressRecord.objects.get(account=account, film=film)
    assert rec.status == Status.COMPLETED
    assert rec.percent == 100
    assert rec.rating == Decimal("4.5")


@pytest.mark.django_db
def test_add_film_already_tracked(store, account, film):
    store.track_film(account.id, film.id)
    out = run(store, *LOGIN, "3", str(film.id), "8")
    assert "You are already tracking this film." in out
    assert ProgressRecord.objects.count() == 1


@pytest.mark.django_db
def test_add_film_bad_rating_reports_error_and_saves_nothing(store, account, film):
    out = run(store, *LOGIN, "3", str(film.id), "3", "9.9", "8")
    assert "Error: rating must be between 1.0 and 5.0" in out
    assert ProgressRecord.objects.count() == 0


@pytest.mark.django_db
def test_add_unknown_film(store, account, film):
    out = run(store, *LOGIN, "3", "999", "8")
    assert "Error: film 999 not found" in out


@pytest.mark.django_db
def test_update_percent_and_notes(store, account, film):
    rec = store.track_film(account.id, film.id)
    run(store, *LOGIN, "4", "1", "2", "60", "4", "1", "4", "Great score", "8")
    rec = store.get_progress(rec.id)
    assert rec.status == Status.IN_PROGRESS
    assert rec.percent == 60
    assert rec.notes == "Great score"


@pytest.mark.django_db
def test_change_status_to_completed(store, account, film):
    rec = store.track_film(account.id, film.id, Status.IN_PROGRESS)
    out = run(store, *LOGIN, "4", "1", "1", "3", "5", "8")
    assert "Status updated successfully!" in out
    rec = store.get_progress(rec.id)
    assert (rec.status, rec.percent, rec.rating) == (Status.COMPLETED, 100, Decimal("5.0"))
    assert rec.completed_on is not None


@pytest.mark.django_db
def test_invalid_percent_is_reported(store, account, film):
    rec = store.track_film(account.id, film.id)
    out = run(store, *LOGIN, "4", "1", "2", "150", "8")
    assert "Error: percent must be between 0 and 100" in out
    assert store.get_progress(rec.id).percent == 0


@pytest.mark.django_db
def test_stop_tracking(store, account, film):
    store.track_film(account.id, film.id)
    out = run(store, *LOGIN, "4", "1", "5", "8")
    assert "Stopped tracking 'Arrival'." in out
    assert not store.is_tracking(account.id, film.id)


@pytest.mark.django_db
def test_my_progress_groups_by_status(store, account, film, other_film):
    store.track_film(account.id, film.id, Status.COMPLETED, rating=4)
    store.track_film(account.id, other_film.id)
    out = run(store, *LOGIN, "2", "8")
    assert "Total Films Tracked: 2" in out
    assert "Completion Rate: 50.0%" in out
    assert "Arrival (2016) - your rating: 4.0/5.0" in out
    assert "PLAN TO START:" in out
    assert "Stalker (1979)" in out


@pytest.mark.django_db
def test_film_statistics(store, account, other_account, film):
    store.track_film(account.id, film.id, Status.COMPLETED, rating=4.0)
    store.track_film(other_account.id, film.id, Status.COMPLETED, rating=5.0)
    out = run(store, *LOGIN, "5", str(film.id), "8")
    assert "Total Users Tracking: 2" in out
    assert "Average User Rating: 4.5 (2 ratings)" in out
    assert "External Rating: 4.2" in out


@pytest.mark.django_db
def test_film_statistics_without_ratings(store, account, film):
    out = run(store, *LOGIN, "5", str(film.id), "8")
    assert "Average User Rating: No ratings yet" in out


@pytest.mark.django_db
def test_account_settings_change_email_and_password(store, account):
    out = run(
        store, *LOGIN,
        "6", "2", "john@new.org",
        "6", "1", "password123", "newsecret", "newsecret",
        "7",
        "1", "john_doe", "newsecret",
        "8",
    )
    assert "Email updated successfully!" in out
    assert "Password changed successfully!" in out
    assert out.count("Welcome back, john_doe!") == 2
    assert store.get_account(account.id).email == "john@new.org"


@pytest.mark.django_db
def test_tracker_command_runs_console(account):
    out = io.StringIO()
    call_command("tracker", stdin=io.StringIO("1\njohn_doe\npassword123\n8\n"), stdout=out)
    assert "Welcome back, john_doe!" in out.getvalue()
