"""
Remaining balance endpoint tests
"""
from fastapi.testclient import TestClient


class TestRemainingBalances:

    def test_crud(self, client: TestClient) -> None:
        created = client.post("/api/remaining/", json={
            "name": "Wali", "phone": "0788888888", "amount": 1000, "advanceAmount": 400, "note": "banner",
        })
        assert created.status_code == 200, created.text
        record = created.json()
        assert record["remainingAmount"] == 600

        updated = client.put(f"/api/remaining/{record['id']}", json={"advanceAmount": 1200}).json()
        assert updated["remainingAmount"] == 0
        assert updated["note"] == "banner"

        assert [r["id"] for r in client.get("/api/remaining/").json()] == [record["id"]]
        assert client.delete(f"/api/remaining/{record['id']}").status_code == 200

        missing = client.get(f"/api/remaining/{record['id']}")
        assert missing.status_code == 404
        assert missing.json()["detail"] == "Record not found"

    def test_amount_must_be_positive(self, client: TestClient) -> None:
        response = client.post("/api/remaining/", json={"name": "Wali", "phone": "078", "amount": 0})
        assert response.status_code == 422

    def test_outstanding_orders(self, client: TestClient) -> None:
        owing = client.post("/api/products/", json={
            "name": "Karim", "phone": "0700000000", "buy": "Card Printing", "amount": 800, "advanceAmount": 200,
        }).json()
        client.post("/api/products/", json={
            "name": "Kamal", "phone": "0711111111", "buy": "Card Printing", "amount": 300, "advanceAmount": 300,
        })

        outstanding = client.get("/api/remaining/outstanding").json()
        assert [o["id"] for o in outstanding] == [owing["id"]]
        assert outstanding[0]["remainingAmount"] == 600

        assert client.get("/api/remaining/outstanding", params={"q": "zzz"}).json() == []
