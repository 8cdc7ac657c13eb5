# tracking/progress.py
"""
State manager for a single ProgressRecord.

Status is derived from percent:
  0        -> PLAN_TO_START
  1..99    -> IN_PROGRESS
  100      -> COMPLETED
Setting a status moves percent to a value consistent with it. started_on and
completed_on are set the first time their threshold is reached and are never
cleared afterwards, whichever entry point reached it.

Every operation validates its arguments before writing any field, so a failed
call leaves the record exactly as it was. Nothing here touches the database;
persisting the record is the store's job.
"""
from __future__ import annotations

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

import pytz
from django.conf import settings
from django.utils import timezone

from .errors import ValidationError
from .models import ProgressRecord, Status

MIN_RATING = Decimal("1.0")
MAX_RATING = Decimal("5.0")
_ONE_DIGIT = Decimal("0.1")

# Percent used when a record is put IN_PROGRESS from outside the 1..99 band.
IN_PROGRESS_FLOOR = 1
IN_PROGRESS_CEILING = 99

RatingInput = Union[int, float, str, Decimal, None]


def now() -> dt.datetime:
    return timezone.now()


def today() -> dt.date:
    """Calendar date of now() in the tracker timezone."""
    tz = pytz.timezone(settings.TRACKER_TIMEZONE)
    return now().astimezone(tz).date()


def status_for_percent(percent: int) -> Status:
    if percent == 0:
        return Status.PLAN_TO_START
    if percent == 100:
        return Status.COMPLETED
    return Status.IN_PROGRESS


def parse_status(value) -> Status:
    """Accept a Status, its token ("IN_PROGRESS") or its label ("In Progress")."""
    if isinstance(value, Status):
        return value
    if isinstance(value, str):
        key = value.strip()
        for st in Status:
            if key.upper() == st.value or key.lower() == st.label.lower():
                return st
    raise ValidationError(f"unrecognized status: {value!r}")


def _check_id(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{name} must be a positive integer")
    return value


def _check_percent(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("percent must be an integer")
    if value < 0 or value > 100:
        raise ValidationError("percent must be between 0 and 100")
    return value


def _check_rating(value: RatingInput) -> Optional[Decimal]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError("rating must be a number")
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"rating must be a number, got {value!r}") from None
    if not d.is_finite() or d < MIN_RATING or d > MAX_RATING:
        raise ValidationError("rating must be between 1.0 and 5.0")
    return d.quantize(_ONE_DIGIT, rounding=ROUND_HALF_UP)


def _apply_percent(record: ProgressRecord, percent: int) -> None:
    # Only called with an already-validated percent.
    record.percent = percent
    record.status = status_for_percent(percent)
    if record.status == Status.IN_PROGRESS and record.started_on is None:
        record.started_on = today()
    if record.status == Status.COMPLETED and record.completed_on is None:
        record.completed_on = today()
    record.last_updated = now()


def create(account_id: int, film_id: int, initial_status=Status.PLAN_TO_START) -> ProgressRecord:
    """Build a new, unsaved record with dates and percent derived from the initial status."""
    _check_id("account_id", account_id)
    _check_id("film_id", film_id)
    st = parse_status(initial_status)

    record = ProgressRecord(
        account_id=account_id,
        film_id=film_id,
        status=Status.PLAN_TO_START,
        percent=0,
        last_updated=now(),
    )
    if st == Status.COMPLETED:
        _apply_percent(record, 100)
    elif st == Status.IN_PROGRESS:
        _apply_percent(record, IN_PROGRESS_FLOOR)
    return record


def set_status(record: ProgressRecord, new_status) -> ProgressRecord:
    st = parse_status(new_status)
    if st == Status.PLAN_TO_START:
        percent = 0
    elif st == Status.COMPLETED:
        percent = 100
    else:
        percent = min(max(record.percent, IN_PROGRESS_FLOOR), IN_PROGRESS_CEILING)
    _apply_percent(record, percent)
    return record


def set_percent(record: ProgressRecord, value: int) -> ProgressRecord:
    _apply_percent(record, _check_percent(value))
    return record


def set_rating(record: ProgressRecord, value: RatingInput) -> ProgressRecord:
    """Set or clear (value=None) the rating."""
    record.rating = _check_rating(value)
    record.last_updated = now()
    return record


def set_notes(record: ProgressRecord, text: Optional[str]) -> ProgressRecord:
    if text is not None and not isinstance(text, str):
        raise ValidationError("notes must be text")
    record.notes = text if text and text.strip() else None
    record.last_updated = now()
    return record


def is_complete(record: ProgressRecord) -> bool:
    return record.status == Status.COMPLETED or record.percent == 100
