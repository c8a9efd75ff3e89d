"""
Ledger endpoint tests
"""
import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def entries(client: TestClient) -> list:
    rows = [
        {"type": "income", "amount": 500, "person": "Nazir", "category": "Sales", "date": "2025-01-10"},
        {"type": "expense", "amount": 120, "person": "Shabir", "category": "Ink", "date": "2025-01-15"},
        {"type": "expense", "amount": 80, "person": "Nazir", "description": "taxi", "date": "2025-02-02"},
    ]
    created = []
    for row in rows:
        response = client.post("/api/ledger/", json=row)
        assert response.status_code == 201, response.text
        created.append(response.json())
    return created


class TestLedgerApi:

    def test_create(self, entries: list) -> None:
        assert entries[0]["type"] == "income"
        assert entries[0]["person"] == "Nazir"
        assert entries[2]["category"] == ""

    def test_rejects_non_iso_date(self, client: TestClient) -> None:
        response = client.post("/api/ledger/", json={"type": "income", "amount": 1, "date": "10/01/2025"})
        assert response.status_code == 422

    def test_rejects_compact_and_week_dates(self, client: TestClient) -> None:
        for value in ("20240115", "2024-W03-1"):
            response = client.post("/api/ledger/", json={"type": "income", "amount": 50, "date": value})
            assert response.status_code == 422, value

        client.post("/api/ledger/", json={"type": "income", "amount": 50, "date": "2024-01-15"})
        in_range = client.get("/api/ledger/", params={"from": "2024-01-01", "to": "2024-01-31"}).json()
        assert [e["date"] for e in in_range] == ["2024-01-15"]

    def test_rejects_compact_range_bounds(self, client: TestClient) -> None:
        assert client.get("/api/ledger/", params={"from": "20240101"}).status_code == 400

    def test_rejects_negative_amount(self, client: TestClient) -> None:
        response = client.post("/api/ledger/", json={"type": "income", "amount": -5, "date": "2025-01-01"})
        assert response.status_code == 422

    def test_list_newest_first(self, client: TestClient, entries: list) -> None:
        dates = [e["date"] for e in client.get("/api/ledger/").json()]
        assert dates == ["2025-02-02", "2025-01-15", "2025-01-10"]

    def test_filters(self, client: TestClient, entries: list) -> None:
        by_person = client.get("/api/ledger/", params={"person": "naz"}).json()
        assert [e["amount"] for e in by_person] == [80, 500]

        in_january = client.get("/api/ledger/", params={"from": "2025-01-01", "to": "2025-01-31"}).json()
        assert len(in_january) == 2

        expenses = client.get("/api/ledger/", params={"type": "expense"}).json()
        assert {e["type"] for e in expenses} == {"expense"}

        assert len(client.get("/api/ledger/", params={"limit": 1}).json()) == 1

    def test_bad_range_is_400(self, client: TestClient) -> None:
        assert client.get("/api/ledger/", params={"from": "January"}).status_code == 400

    def test_summary(self, client: TestClient, entries: list) -> None:
        assert client.get("/api/ledger/summary").json() == {"income": 500, "expense": 200, "balance": 300}
        january = client.get("/api/ledger/summary", params={"to": "2025-01-31"}).json()
        assert january == {"income": 500, "expense": 120, "balance": 380}

    def test_update_and_delete(self, client: TestClient, entries: list) -> None:
        entry_id = entries[1]["id"]
        updated = client.put(f"/api/ledger/{entry_id}", json={"amount": 150, "category": "Paper"}).json()
        assert updated["amount"] == 150
        assert updated["category"] == "Paper"
        assert updated["person"] == "Shabir"

        assert client.delete(f"/api/ledger/{entry_id}").json() == {"message": "Deleted"}
        assert client.put(f"/api/ledger/{entry_id}", json={"amount": 1}).status_code == 404
        assert client.delete(f"/api/ledger/{entry_id}").status_code == 404
