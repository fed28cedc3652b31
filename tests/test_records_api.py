"""
Tests for the /api/v1/records endpoints
"""

import pytest
from fastapi.testclient import TestClient

from conftest import StaticIdentity
from connect_db import get_db
from core.dependencies import get_identity, get_view_cache
from main import app


@pytest.fixture
def client(session_factory, identity, view_cache):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity] = lambda: identity
    app.dependency_overrides[get_view_cache] = lambda: view_cache
    yield TestClient(app)
    app.dependency_overrides.clear()


def _create(client, **overrides):
    form = {"text": "Groceries", "amount": "42.5", "category": "Food", "date": "2024-03-05"}
    form.update(overrides)
    return client.post("/api/v1/records", data=form)


def test_create_record(client, view_cache):
    response = _create(client)

    assert response.status_code == 200
    assert response.json() == {
        "data": {"text": "Groceries", "amount": 42.5, "category": "Food", "date": "2024-03-05T12:00:00.000Z"}
    }
    assert view_cache.is_stale("/")


def test_create_record_missing_field(client):
    response = client.post("/api/v1/records", data={"text": "Groceries", "amount": "1", "category": "Food"})

    assert response.status_code == 200
    assert response.json() == {"error": "Text, amount, category, or date is missing"}


def test_list_records(client):
    for day in ("2024-01-01", "2024-01-03", "2024-01-02"):
        _create(client, date=day)

    response = client.get("/api/v1/records")

    records = response.json()["records"]
    assert [record["date"][:10] for record in records] == ["2024-01-03", "2024-01-02", "2024-01-01"]
    assert records[0]["text"] == "Groceries"
    assert records[0]["date"].startswith("2024-01-03T12:00:00")


def test_list_records_unknown_user(client):
    assert client.get("/api/v1/records").json() == {"error": "User not found in database"}


def test_aggregates(client):
    for amount in ("5", "0", "-2", "10"):
        _create(client, amount=amount)

    assert client.get("/api/v1/records/best-worst").json() == {"bestExpense": 10, "worstExpense": -2}
    assert client.get("/api/v1/records/totals").json() == {"record": 13, "daysWithRecords": 2}


def test_delete_record(client):
    _create(client)
    record_id = client.get("/api/v1/records").json()["records"][0]["id"]

    assert client.delete(f"/api/v1/records/{record_id}").json() == {"message": "Record deleted"}
    assert client.delete(f"/api/v1/records/{record_id}").json() == {"error": "Database error"}
    assert client.get("/api/v1/records").json() == {"records": []}


def test_unauthenticated_requests(client):
    app.dependency_overrides[get_identity] = lambda: StaticIdentity(None)

    assert _create(client).json() == {"error": "User not authenticated"}
    assert client.get("/api/v1/records").json() == {"error": "User not authenticated"}
    assert client.get("/api/v1/records/best-worst").json() == {"error": "User not found"}
    assert client.get("/api/v1/records/totals").json() == {"error": "User not authenticated"}
    assert client.delete("/api/v1/records/r1").json() == {"error": "User not found"}


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
