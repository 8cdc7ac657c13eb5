# tracking/services.py
from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Dict, Iterable

from .models import ProgressRecord, Status


@dataclass(frozen=True)
class AccountSummary:
    total: int = 0
    plan_to_start: int = 0
    in_progress: int = 0
    completed: int = 0

    @property
    def completion_rate(self) -> float:
        """Percentage of tracked films that are completed (0.0 when nothing is tracked)."""
        if not self.total:
            return 0.0
        return self.completed * 100.0 / self.total

    def as_dict(self) -> Dict:
        out = asdict(self)
        out["completion_rate"] = self.completion_rate
        return out


@dataclass(frozen=True)
class FilmStats:
    total_trackers: int = 0
    plan_to_start: int = 0
    in_progress: int = 0
    completed: int = 0
    rated: int = 0                 # how many records carry a rating
    average_rating: float = 0.0    # 0.0 when rated == 0

    def as_dict(self) -> Dict:
        return asdict(self)


def _status_counts(records: Iterable[ProgressRecord]) -> Dict[str, int]:
    counts = {st.value: 0 for st in Status}
    for rec in records:
        counts[Status(rec.status).value] += 1
    return counts


def summarize_by_account(records: Iterable[ProgressRecord]) -> AccountSummary:
    """Status breakdown over one account's records. Pure; no queries."""
    counts = _status_counts(records)
    return AccountSummary(
        total=sum(counts.values()),
        plan_to_start=counts[Status.PLAN_TO_START.value],
        in_progress=counts[Status.IN_PROGRESS.value],
        completed=counts[Status.COMPLETED.value],
    )


def summarize_by_film(records: Iterable[ProgressRecord]) -> FilmStats:
    """
    Tracker counts and mean user rating over one film's records.

    Ratings are summed as Decimal so the result does not depend on the
    order of the input. Callers tell "no ratings" apart from a real
    average through `rated`.
    """
    records = list(records)
    counts = _status_counts(records)

    rated = 0
    rating_sum = Decimal("0")
    for rec in records:
        if rec.rating is None:
            continue
        rated += 1
        rating_sum += Decimal(str(rec.rating))

    average = float(rating_sum / rated) if rated else 0.0
    return FilmStats(
        total_trackers=len(records),
        plan_to_start=counts[Status.PLAN_TO_START.value],
        in_progress=counts[Status.IN_PROGRESS.value],
        completed=counts[Status.COMPLETED.value],
        rated=rated,
        average_rating=average,
    )
