from decimal import Decimal

import pytest

from tracking.store import TrackingStore


@pytest.fixture(autouse=True)
def fast_hashers(settings):
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]


@pytest.fixture
def store():
    return TrackingStore()


@pytest.fixture
def account(store):
    return store.register("john_doe", "password123", "john@email.com")


@pytest.fixture
def other_account(store):
    return store.register("jane_smith", "securepass", "jane@email.com")


@pytest.fixture
def film(store):
    return store.add_film(
        "Arrival",
        synopsis="A linguist works with the military to communicate with alien lifeforms.",
        runtime_minutes=116,
        release_year=2016,
        genre="Sci-Fi",
        director="Denis Villeneuve",
        external_rating=Decimal("4.2"),
    )


@pytest.fixture
def other_film(store):
    return store.add_film("Stalker", release_year=1979, director="Andrei Tarkovsky",
                          external_rating=Decimal("4.1"))
