import pytest
from rest_framework.test import APIClient

from tracking.models import ProgressRecord, Status


@pytest.fixture
def client():
    return APIClient()


def track(c, account_id, payload):
    return c.post(f"/api/accounts/{account_id}/progress", payload, format="json")


@pytest.mark.django_db
def test_film_list_and_detail(client, film, other_film):
    r = client.get("/api/films")
    assert r.status_code == 200
    data = r.json()
    assert [f["title"] for f in data] == ["Arrival", "Stalker"]
    assert data[0]["external_rating"] == 4.2

    r = client.get(f"/api/films/{film.id}")
    assert r.status_code == 200
    assert r.json()["director"] == "Denis Villeneuve"

    assert client.get("/api/films/999").status_code == 404


@pytest.mark.django_db
def test_track_film_created(client, account, film):
    r = track(client, account.id, {"film_id": film.id, "status": "COMPLETED", "rating": "4.5", "notes": "Great"})
    assert r.status_code == 201
    body = r.json()
    assert body["account_id"] == account.id
    assert body["film_id"] == film.id
    assert body["film_title"] == "Arrival"
    assert body["status"] == "COMPLETED"
    assert body["percent"] == 100
    assert body["rating"] == 4.5
    assert body["completed_on"] is not None
    assert body["last_updated"].endswith("Z")


@pytest.mark.django_db
def test_track_film_defaults_to_plan_to_start(client, account, film):
    r = track(client, account.id, {"film_id": film.id})
    assert r.status_code == 201
    assert r.json()["status"] == "PLAN_TO_START"
    assert r.json()["percent"] == 0


@pytest.mark.django_db
def test_track_film_twice_conflict_409(client, account, film):
    assert track(client, account.id, {"film_id": film.id, "status": "IN_PROGRESS"}).status_code == 201
    r = track(client, account.id, {"film_id": film.id, "status": "COMPLETED"})
    assert r.status_code == 409
    assert "already tracking" in r.json()["detail"]
    rec = ProgressRecord.objects.get(account=account, film=film)
    assert rec.status == Status.IN_PROGRESS


@pytest.mark.django_db
@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"film_id": "abc"},
        {"film_id": 1, "status": "WATCHING"},
        {"film_id": 1, "rating": "5.5"},
        {"film_id": 1, "rating": "0.5"},
    ],
)
def test_track_film_bad_input_400(client, account, film, payload):
    if payload.get("film_id") == 1:
        payload = dict(payload, film_id=film.id)
    r = track(client, account.id, payload)
    assert r.status_code == 400
    assert ProgressRecord.objects.count() == 0


@pytest.mark.django_db
def test_track_film_unknown_ids_404(client, account, film):
    assert track(client, account.id, {"film_id": 999}).status_code == 404
    assert track(client, 999, {"film_id": film.id}).status_code == 404


@pytest.mark.django_db
def test_patch_progress(client, account, film):
    rec_id = track(client, account.id, {"film_id": film.id}).json()["id"]

    r = client.patch(f"/api/progress/{rec_id}", {"percent": 45}, format="json")
    assert r.status_code == 200
    assert r.json()["status"] == "IN_PROGRESS"
    assert r.json()["started_on"] is not None

    r = client.patch(f"/api/progress/{rec_id}", {"status": "Completed", "rating": 3}, format="json")
    assert r.status_code == 200
    body = r.json()
    assert (body["status"], body["percent"], body["rating"]) == ("COMPLETED", 100, 3.0)

    r = client.patch(f"/api/progress/{rec_id}", {"notes": "Rewatch"}, format="json")
    assert r.json()["notes"] == "Rewatch"


@pytest.mark.django_db
def test_patch_with_bad_rating_changes_nothing(client, account, film):
    rec_id = track(client, account.id, {"film_id": film.id}).json()["id"]
    r = client.patch(f"/api/progress/{rec_id}", {"status": "COMPLETED", "rating": "9"}, format="json")
    assert r.status_code == 400
    rec = ProgressRecord.objects.get(pk=rec_id)
    assert rec.status == Status.PLAN_TO_START
    assert rec.percent == 0


@pytest.mark.django_db
def test_patch_rejects_empty_and_out_of_range(client, account, film):
    rec_id = track(client, account.id, {"film_id": film.id}).json()["id"]
    assert client.patch(f"/api/progress/{rec_id}", {}, format="json").status_code == 400
    assert client.patch(f"/api/progress/{rec_id}", {"percent": 101}, format="json").status_code == 400
    assert client.patch("/api/progress/999", {"percent": 10}, format="json").status_code == 404


@pytest.mark.django_db
def test_get_and_delete_progress(client, account, film):
    rec_id = track(client, account.id, {"film_id": film.id}).json()["id"]
    assert client.get(f"/api/progress/{rec_id}").status_code == 200
    assert client.delete(f"/api/progress/{rec_id}").status_code == 204
    assert client.get(f"/api/progress/{rec_id}").status_code == 404
    assert client.delete(f"/api/progress/{rec_id}").status_code == 404


@pytest.mark.django_db
def test_account_progress_list_and_filter(client, account, film, other_film):
    track(client, account.id, {"film_id": film.id, "status": "COMPLETED"})
    track(client, account.id, {"film_id": other_film.id})

    r = client.get(f"/api/accounts/{account.id}/progress")
    assert r.status_code == 200
    assert len(r.json()) == 2

    r = client.get(f"/api/accounts/{account.id}/progress?status=COMPLETED")
    assert [row["film_title"] for row in r.json()] == ["Arrival"]

    assert client.get(f"/api/accounts/{account.id}/progress?status=NOPE").status_code == 400
    assert client.get("/api/accounts/999/progress").status_code == 404


@pytest.mark.django_db
def test_account_summary(client, account, film, other_film):
    r = client.get(f"/api/accounts/{account.id}/summary")
    assert r.status_code == 200
    assert r.json() == {
        "account_id": account.id,
        "total": 0,
        "plan_to_start": 0,
        "in_progress": 0,
        "completed": 0,
        "completion_rate": 0.0,
    }

    track(client, account.id, {"film_id": film.id, "status": "COMPLETED"})
    track(client, account.id, {"film_id": other_film.id, "status": "IN_PROGRESS"})
    data = client.get(f"/api/accounts/{account.id}/summary").json()
    assert (data["total"], data["completed"], data["in_progress"]) == (2, 1, 1)
    assert data["completion_rate"] == 50.0


@pytest.mark.django_db
def test_film_stats(client, store, account, other_account, film):
    third = store.register("admin", "admin123")
    track(client, account.id, {"film_id": film.id, "status": "COMPLETED", "rating": 4.0})
    track(client, other_account.id, {"film_id": film.id, "status": "COMPLETED", "rating": 5.0})
    track(client, third.id, {"film_id": film.id, "status": "IN_PROGRESS"})

    r = client.get(f"/api/films/{film.id}/stats")
    assert r.status_code == 200
    assert r.json() == {
        "film_id": film.id,
        "total_trackers": 3,
        "plan_to_start": 0,
        "in_progress": 1,
        "completed": 2,
        "rated": 2,
        "average_rating": 4.5,
    }
    assert client.get("/api/films/999/stats").status_code == 404
