# tracking/store.py
"""
Persistence store for accounts, films and progress records.

TrackingStore is constructed explicitly and handed to whoever needs it (the
console, the API views, management commands). It wraps the Django ORM with
the lookups the tracker uses and funnels every progress mutation through the
state manager in `tracking.progress` before saving.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Optional

from django.contrib.auth.hashers import check_password, make_password
from django.db import IntegrityError, transaction

from . import progress
from .errors import DuplicateTrackingError, NotFoundError, ValidationError
from .models import Account, Film, ProgressRecord, Status
from .services import AccountSummary, FilmStats, summarize_by_account, summarize_by_film

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _clean_username(username) -> str:
    username = (username or "").strip()
    if not username:
        raise ValidationError("username cannot be empty")
    if len(username) > 50:
        raise ValidationError("username cannot exceed 50 characters")
    return username


def _check_password_value(password) -> str:
    if not password:
        raise ValidationError("password cannot be empty")
    if len(password) > 255:
        raise ValidationError("password cannot exceed 255 characters")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"password must be at least {MIN_PASSWORD_LENGTH} characters long")
    return password


def _clean_email(email) -> Optional[str]:
    email = (email or "").strip()
    if not email:
        return None
    if len(email) > 100:
        raise ValidationError("email cannot exceed 100 characters")
    if "@" not in email:
        raise ValidationError("invalid email format")
    return email


class TrackingStore:

    # ---------------- accounts ----------------

    def register(self, username: str, password: str, email: Optional[str] = None) -> Account:
        username = _clean_username(username)
        _check_password_value(password)
        email = _clean_email(email)
        if self.username_exists(username):
            raise ValidationError(f"username {username!r} already exists")
        try:
            account = Account.objects.create(
                username=username, password=make_password(password), email=email
            )
        except IntegrityError:
            raise ValidationError(f"username {username!r} already exists") from None
        logger.info("registered account id=%s username=%s", account.id, username)
        return account

    def get_account(self, account_id: int) -> Account:
        try:
            return Account.objects.get(pk=account_id)
        except Account.DoesNotExist:
            raise NotFoundError("account", account_id) from None

    def find_account_by_username(self, username: str) -> Optional[Account]:
        return Account.objects.filter(username=(username or "").strip()).first()

    def username_exists(self, username: str) -> bool:
        return Account.objects.filter(username=(username or "").strip()).exists()

    def authenticate(self, username: str, password: str) -> Optional[Account]:
        """Return the account when the credentials match, otherwise None."""
        account = self.find_account_by_username(username)
        if account is None or not password:
            return None
        if not check_password(password, account.password):
            return None
        return account

    def change_password(self, account_id: int, current: str, new: str) -> Account:
        account = self.get_account(account_id)
        if not check_password(current or "", account.password):
            raise ValidationError("current password is incorrect")
        _check_password_value(new)
        account.password = make_password(new)
        account.save(update_fields=["password"])
        logger.info("changed password for account id=%s", account_id)
        return account

    def update_email(self, account_id: int, email: Optional[str]) -> Account:
        """Set the contact email; a blank value removes it."""
        account = self.get_account(account_id)
        account.email = _clean_email(email)
        account.save(update_fields=["email"])
        logger.info("updated email for account id=%s", account_id)
        return account

    def account_count(self) -> int:
        return Account.objects.count()

    # ---------------- films ----------------

    def add_film(self, title: str, **fields) -> Film:
        film = Film(title=(title or "").strip(), **fields)
        if not film.title:
            raise ValidationError("title cannot be empty")
        if len(film.title) > 255:
            raise ValidationError("title cannot exceed 255 characters")
        if film.runtime_minutes is not None and film.runtime_minutes < 0:
            raise ValidationError("runtime cannot be negative")
        if film.genre and len(film.genre) > 100:
            raise ValidationError("genre cannot exceed 100 characters")
        if film.director and len(film.director) > 150:
            raise ValidationError("director name cannot exceed 150 characters")
        if film.external_rating is not None:
            rating = Decimal(str(film.external_rating))
            if rating < progress.MIN_RATING or rating > progress.MAX_RATING:
                raise ValidationError("external rating must be between 1.0 and 5.0")
            film.external_rating = rating
        film.save()
        logger.info("added film id=%s title=%s", film.id, film.title)
        return film

    def get_film(self, film_id: int) -> Film:
        try:
            return Film.objects.get(pk=film_id)
        except Film.DoesNotExist:
            raise NotFoundError("film", film_id) from None

    def list_films(self) -> List[Film]:
        return list(Film.objects.order_by("id"))

    def search_films(self, text: str) -> List[Film]:
        return list(Film.objects.filter(title__icontains=(text or "").strip()).order_by("title"))

    def top_rated_films(self, limit: int = 5) -> List[Film]:
        return list(
            Film.objects.filter(external_rating__isnull=False).order_by("-external_rating", "title")[:limit]
        )

    def film_count(self) -> int:
        return Film.objects.count()

    # ---------------- progress ----------------

    def track_film(self, account_id: int, film_id: int, status=Status.PLAN_TO_START,
                   rating=None, notes: Optional[str] = None) -> ProgressRecord:
        """
        Start tracking a film for an account.

        The record is fully built and validated before anything is written.
        The pair check here is advisory: two sessions can both pass it, and
        then the unique constraint rejects the second insert, which is
        reported the same way.
        """
        record = progress.create(account_id, film_id, status)
        if rating is not None:
            progress.set_rating(record, rating)
        if notes is not None:
            progress.set_notes(record, notes)

        self.get_account(account_id)
        self.get_film(film_id)
        if self.is_tracking(account_id, film_id):
            logger.warning("duplicate tracking rejected account=%s film=%s", account_id, film_id)
            raise DuplicateTrackingError(account_id, film_id)

        try:
            with transaction.atomic():
                record.save(force_insert=True)
        except IntegrityError:
            if self.is_tracking(account_id, film_id):
                logger.warning("duplicate tracking rejected by constraint account=%s film=%s",
                               account_id, film_id)
                raise DuplicateTrackingError(account_id, film_id) from None
            raise
        logger.info("account=%s started tracking film=%s status=%s", account_id, film_id, record.status)
        return record

    def get_progress(self, progress_id: int) -> ProgressRecord:
        try:
            return ProgressRecord.objects.select_related("film", "account").get(pk=progress_id)
        except ProgressRecord.DoesNotExist:
            raise NotFoundError("progress record", progress_id) from None

    def find_progress(self, account_id: int, film_id: int) -> Optional[ProgressRecord]:
        return (
            ProgressRecord.objects.select_related("film")
            .filter(account_id=account_id, film_id=film_id)
            .first()
        )

    def is_tracking(self, account_id: int, film_id: int) -> bool:
        return ProgressRecord.objects.filter(account_id=account_id, film_id=film_id).exists()

    def records_for_account(self, account_id: int, status=None) -> List[ProgressRecord]:
        """All records of an account, most recently updated first."""
        self.get_account(account_id)
        qs = ProgressRecord.objects.select_related("film").filter(account_id=account_id)
        if status is not None:
            qs = qs.filter(status=progress.parse_status(status).value)
        return list(qs.order_by("-last_updated", "-id"))

    def records_for_film(self, film_id: int) -> List[ProgressRecord]:
        self.get_film(film_id)
        qs = ProgressRecord.objects.select_related("account").filter(film_id=film_id)
        return list(qs.order_by("-last_updated", "-id"))

    def save_progress(self, record: ProgressRecord) -> ProgressRecord:
        record.save()
        logger.info("saved progress id=%s status=%s percent=%s", record.id, record.status, record.percent)
        return record

    def update_status(self, progress_id: int, status) -> ProgressRecord:
        record = self.get_progress(progress_id)
        progress.set_status(record, status)
        return self.save_progress(record)

    def update_percent(self, progress_id: int, percent: int) -> ProgressRecord:
        record = self.get_progress(progress_id)
        progress.set_percent(record, percent)
        return self.save_progress(record)

    def update_rating(self, progress_id: int, rating) -> ProgressRecord:
        record = self.get_progress(progress_id)
        progress.set_rating(record, rating)
        return self.save_progress(record)

    def update_notes(self, progress_id: int, notes: Optional[str]) -> ProgressRecord:
        record = self.get_progress(progress_id)
        progress.set_notes(record, notes)
        return self.save_progress(record)

    def untrack(self, progress_id: int) -> None:
        deleted, _ = ProgressRecord.objects.filter(pk=progress_id).delete()
        if not deleted:
            raise NotFoundError("progress record", progress_id)
        logger.info("deleted progress id=%s", progress_id)

    # ---------------- statistics ----------------

    def account_summary(self, account_id: int) -> AccountSummary:
        return summarize_by_account(self.records_for_account(account_id))

    def film_stats(self, film_id: int) -> FilmStats:
        return summarize_by_film(self.records_for_film(film_id))
