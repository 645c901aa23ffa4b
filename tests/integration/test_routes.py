import pytest
from fastapi.testclient import TestClient

from app.domains.auth.jwt_service import JWTService
from main import app


@pytest.fixture
def client(service):
    # startup hooks are skipped without the context manager, so no MongoDB is needed
    app.state.transaction_service = service
    yield TestClient(app)
    del app.state.transaction_service


@pytest.fixture
def broken_client(broken_service):
    app.state.transaction_service = broken_service
    yield TestClient(app)
    del app.state.transaction_service


def auth_headers(user_id: str = "user-1") -> dict:
    return {"Authorization": f"Bearer {JWTService().create_access_token(user_id)}"}


@pytest.mark.integration
class TestAuth:

    def test_missing_token_is_forbidden(self, client):
        assert client.get("/api/dashboard").status_code == 403

    def test_invalid_token_is_unauthorized(self, client):
        response = client.get("/api/dashboard", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    def test_health_is_public(self, client):
        assert client.get("/health").json() == {"status": "ok"}


@pytest.mark.integration
class TestTransactionRoutes:

    def test_create_then_read(self, client, valid_payload):
        created = client.post("/api/transactions", json=valid_payload, headers=auth_headers())

        assert created.status_code == 200
        body = created.json()
        assert body["success"] is True

        fetched = client.get(f"/api/transactions/{body['transaction_id']}", headers=auth_headers())
        assert fetched.status_code == 200
        assert fetched.json()["amount"] == 42.5
        assert fetched.json()["user_id"] == "user-1"

    def test_create_validation_error(self, client, valid_payload):
        valid_payload["amount"] = -1

        response = client.post("/api/transactions", json=valid_payload, headers=auth_headers())

        assert response.status_code == 400
        assert "amount" in response.json()["field_errors"]

    def test_other_user_cannot_read_or_delete(self, client, valid_payload):
        transaction_id = client.post(
            "/api/transactions", json=valid_payload, headers=auth_headers()
        ).json()["transaction_id"]

        assert client.get(f"/api/transactions/{transaction_id}", headers=auth_headers("user-2")).status_code == 404
        response = client.delete(f"/api/transactions/{transaction_id}", headers=auth_headers("user-2"))
        assert response.status_code == 404
        assert response.json()["not_found"] is True

    def test_update(self, client, valid_payload):
        transaction_id = client.post(
            "/api/transactions", json=valid_payload, headers=auth_headers()
        ).json()["transaction_id"]

        response = client.put(
            f"/api/transactions/{transaction_id}",
            json={**valid_payload, "description": "Farmers market"},
            headers=auth_headers(),
        )

        assert response.status_code == 200
        assert f"transaction:{transaction_id}" in response.json()["stale_views"]
        fetched = client.get(f"/api/transactions/{transaction_id}", headers=auth_headers()).json()
        assert fetched["description"] == "Farmers market"

    def test_delete_unknown_is_not_found(self, client):
        response = client.delete("/api/transactions/65a000000000000000000000", headers=auth_headers())

        assert response.status_code == 404

    def test_list_sorted_and_paged(self, client, valid_payload):
        for amount in ("5", "15", "10"):
            client.post("/api/transactions", json={**valid_payload, "amount": amount}, headers=auth_headers())

        response = client.get(
            "/api/transactions",
            params={"sort_by": "amount", "direction": "desc", "page": 0, "page_size": 2},
            headers=auth_headers(),
        )

        body = response.json()
        assert [item["amount"] for item in body["items"]] == [15.0, 10.0]
        assert body["total_items"] == 3
        assert body["has_next"] is True

    def test_list_rejects_bad_paging(self, client):
        response = client.get("/api/transactions", params={"page_size": 0}, headers=auth_headers())

        assert response.status_code == 422

    def test_dashboard(self, client, valid_payload):
        client.post("/api/transactions", json=valid_payload, headers=auth_headers())
        client.post(
            "/api/transactions",
            json={**valid_payload, "amount": "100", "category": "utilities"},
            headers=auth_headers(),
        )

        body = client.get("/api/dashboard", headers=auth_headers()).json()

        assert body["total_expenses"] == 142.5
        assert body["transaction_count"] == 2
        assert [c["category"] for c in body["category_totals"]] == ["utilities", "groceries"]
        assert body["category_totals"][0]["label"] == "Utilities"
        assert len(body["recent_transactions"]) == 2

    def test_view_versions_move_after_mutation(self, client, valid_payload):
        assert client.get("/api/views/versions", headers=auth_headers()).json() == {"versions": {}}

        client.post("/api/transactions", json=valid_payload, headers=auth_headers())

        versions = client.get("/api/views/versions", headers=auth_headers()).json()["versions"]
        assert versions == {"transactions": 1, "dashboard": 1}

    def test_categories(self, client):
        categories = client.get("/api/categories").json()["categories"]

        assert {"value": "food", "label": "Food & Dining"} in categories
        assert len(categories) == 8


@pytest.mark.integration
class TestStoreOutage:

    def test_mutation_reports_service_unavailable(self, broken_client, valid_payload):
        response = broken_client.post("/api/transactions", json=valid_payload, headers=auth_headers())

        assert response.status_code == 503
        assert response.json()["error"] == "Failed to add transaction."

    def test_dashboard_degrades_to_empty(self, broken_client):
        response = broken_client.get("/api/dashboard", headers=auth_headers())

        assert response.status_code == 200
        assert response.json()["total_expenses"] == 0
        assert response.json()["category_totals"] == []
