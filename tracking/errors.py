# tracking/errors.py


class TrackerError(Exception):
    """Base class for errors raised by the tracking core and store."""


class ValidationError(TrackerError):
    """An argument breaks a record or account rule; nothing was changed."""


class DuplicateTrackingError(TrackerError):
    """The (account, film) pair already has a progress record."""

    def __init__(self, account_id, film_id):
        super().__init__(f"account {account_id} is already tracking film {film_id}")
        self.account_id = account_id
        self.film_id = film_id


class NotFoundError(TrackerError):
    """A referenced account, film or progress record does not exist."""

    def __init__(self, kind: str, key):
        super().__init__(f"{kind} {key!r} not found")
        self.kind = kind
        self.key = key
