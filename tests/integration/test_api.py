"""Integration tests for API endpoints"""

import uuid
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from bijoux_ledger.infrastructure.database.repositories import FinancialSettingsRepository


@pytest.fixture
def open_debt(client: TestClient) -> dict:
    """10,000 FRW debt for a customer with a phone"""
    response = client.post(
        "/v1/debts",
        json={
            "customer_name": "Aline",
            "amount_cents": 1_000_000,
            "items_description": "Bague en or",
            "phone": "078 123 4567",
            "line_items": [{"name": "Bague en or", "quantity": 1}],
        },
    )
    assert response.status_code == 201
    return response.json()["debt"]


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "bijoux_settlement_total" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-42"})
    assert response.headers["X-Request-ID"] == "req-42"


def test_ledger_routes_require_caller(client: TestClient):
    response = client.get("/v1/summary", headers={"X-Caller-ID": ""})
    assert response.status_code == 401


def test_create_debt_returns_confirmation(client: TestClient):
    response = client.post(
        "/v1/debts",
        json={"customer_name": "Aline", "amount_cents": 1_500_000, "items_description": "Collier", "phone": "0781234567"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["debt"]["amount_owed_cents"] == 1_500_000
    assert data["debt"]["is_paid"] is False
    assert data["notification"]["international_phone"] == "250781234567"
    assert "15,000 FRW" in data["notification"]["message"]


def test_create_debt_rejects_bad_amount(client: TestClient):
    response = client.post("/v1/debts", json={"customer_name": "Aline", "amount_cents": 0})

    assert response.status_code == 422
    assert response.json()["detail"]["error"] == "InvalidAmountError"


def test_partial_then_full_payment(client: TestClient, open_debt: dict, inventory):
    debt_id = open_debt["id"]

    partial = client.post(f"/v1/debts/{debt_id}/payments", json={"amount_cents": 400_000})
    assert partial.status_code == 200
    assert partial.json()["remaining_cents"] == 600_000
    assert partial.json()["fully_settled"] is False
    assert "6,000 FRW" in partial.json()["message"]

    full = client.post(
        f"/v1/debts/{debt_id}/payments",
        json={"amount_cents": 600_000, "thank_you_message": "Murakoze cyane!"},
    )
    assert full.status_code == 200
    assert full.json()["fully_settled"] is True
    assert full.json()["message"] == "Murakoze cyane!"
    assert full.json()["debt"]["is_paid"] is True
    assert inventory.decrements == [("Bague en or", 1)]

    summary = client.get("/v1/summary").json()
    assert summary["total_collected_cents"] == 1_000_000
    assert summary["total_unpaid_cents"] == 0


def test_payment_error_mapping(client: TestClient, open_debt: dict):
    debt_id = open_debt["id"]

    invalid = client.post(f"/v1/debts/{debt_id}/payments", json={"amount_cents": -5})
    assert invalid.status_code == 422

    missing = client.post(f"/v1/debts/{uuid.uuid4()}/payments", json={"amount_cents": 100})
    assert missing.status_code == 404
    assert missing.json()["detail"]["error"] == "DebtNotFoundError"

    client.post(f"/v1/debts/{debt_id}/payments", json={"amount_cents": 1_000_000})
    settled = client.post(f"/v1/debts/{debt_id}/payments", json={"amount_cents": 100})
    assert settled.status_code == 409
    assert settled.json()["detail"]["error"] == "AlreadySettledError"


def test_secondary_failure_reported_with_success(client: TestClient, open_debt: dict, inventory):
    inventory.failing_items.add("Bague en or")

    response = client.post(f"/v1/debts/{open_debt['id']}/payments", json={"amount_cents": 1_000_000})

    assert response.status_code == 200
    assert response.json()["fully_settled"] is True
    assert response.json()["secondary_failures"][0]["target"] == "Bague en or"


def test_settle_with_cost(client: TestClient, open_debt: dict):
    response = client.post(f"/v1/debts/{open_debt['id']}/settle-with-cost", json={"cost_cents": 650_000})

    assert response.status_code == 200
    data = response.json()
    assert data["profit_cents"] == 350_000
    assert data["sale"]["unit_sale_price_cents"] == 1_000_000
    assert data["sale"]["debt_id"] == open_debt["id"]

    sales = client.get("/v1/sales/summary").json()
    assert sales["sale_count"] == 1
    assert sales["profit_cents"] == 350_000


def test_list_get_delete_debt(client: TestClient, open_debt: dict):
    listing = client.get("/v1/debts", params={"search": "aline"}).json()
    assert [d["id"] for d in listing["debts"]] == [open_debt["id"]]

    assert client.get(f"/v1/debts/{open_debt['id']}").status_code == 200
    assert client.delete(f"/v1/debts/{open_debt['id']}").status_code == 204
    assert client.get(f"/v1/debts/{open_debt['id']}").status_code == 404


def test_reminder(client: TestClient, open_debt: dict):
    response = client.get(f"/v1/debts/{open_debt['id']}/reminder")

    assert response.status_code == 200
    assert response.json()["message"] == "Muraho, mwampaye kuri Bague en or amafaranga muzishyura ni 10,000 FRW"


def test_reminder_without_phone(client: TestClient):
    debt = client.post("/v1/debts", json={"customer_name": "Eric", "amount_cents": 100_000}).json()["debt"]

    response = client.get(f"/v1/debts/{debt['id']}/reminder")

    assert response.status_code == 422
    assert response.json()["detail"]["error"] == "MissingContactError"


def test_clients_endpoints(client: TestClient, open_debt: dict):
    saved = client.post("/v1/clients", json={"name": "Jeanne", "phone": "0781112222"})
    assert saved.status_code == 200
    assert saved.json()["name"] == "Jeanne"

    names = {c["name"] for c in client.get("/v1/clients").json()}
    assert names == {"Aline", "Jeanne"}

    assert client.delete("/v1/clients/Jeanne").json() == {"deleted": 1}
    assert client.delete("/v1/clients/Aline").json() == {"deleted": 0}


def test_sales_endpoints(client: TestClient, inventory):
    created = client.post(
        "/v1/sales",
        json={"item_name": "Collier", "unit_sale_price_cents": 250_000, "quantity": 2, "unit_cost_cents": 200_000},
    )
    assert created.status_code == 201
    assert created.json()["sale"]["profit_cents"] == 100_000
    assert inventory.decrements == [("Collier", 2)]

    assert len(client.get("/v1/sales").json()) == 1
    assert client.get("/v1/summary").json()["total_collected_cents"] == 500_000

    bad = client.post("/v1/sales", json={"item_name": "Collier", "unit_sale_price_cents": 100, "unit_cost_cents": -1})
    assert bad.status_code == 422


def test_settings_endpoints(client: TestClient):
    assert client.put("/v1/settings/capital", json={"amount_cents": 1_000_000}).json()["total_capital_cents"] == 1_000_000

    added = client.post("/v1/settings/capital/add", json={"amount_cents": 500_000}).json()
    assert added["total_capital_cents"] == 1_500_000
    assert added["profit_cents"] == -1_500_000

    client.put("/v1/settings/balances/2026-03-14", json={"amount_cents": 90_000})
    balances = client.get("/v1/settings/balances").json()
    assert balances == [{"balance_date": "2026-03-14", "amount_cents": 90_000}]

    assert client.put("/v1/settings/capital", json={"amount_cents": -1}).status_code == 422


def test_maintenance_endpoints(client: TestClient, open_debt: dict):
    client.post(f"/v1/debts/{open_debt['id']}/payments", json={"amount_cents": 1_000_000})

    cycle = client.post("/v1/maintenance/reset-cycle").json()
    assert cycle["scope"] == "cycle"
    assert cycle["prior_collected_cents"] == 1_000_000
    assert cycle["debts_reverted"] == 1
    assert client.get(f"/v1/debts/{open_debt['id']}").json()["amount_owed_cents"] == 1_000_000

    money = client.post("/v1/maintenance/reset-money").json()
    assert money["scope"] == "money"

    factory = client.post("/v1/maintenance/factory-reset").json()
    assert factory["scope"] == "factory"
    assert client.get("/v1/summary").json()["unpaid_customer_count"] == 1


def test_storage_failure_maps_to_503(client: TestClient, open_debt: dict, monkeypatch):
    def disk_error(self, delta_cents, now):
        raise OperationalError("UPDATE financial_settings", {}, Exception("database is locked"))

    monkeypatch.setattr(FinancialSettingsRepository, "increment_collected", disk_error)

    response = client.post(f"/v1/debts/{open_debt['id']}/payments", json={"amount_cents": 400_000})

    assert response.status_code == 503
    assert response.json()["detail"]["error"] == "StorageFailureError"
    monkeypatch.undo()
    assert client.get(f"/v1/debts/{open_debt['id']}").json()["amount_owed_cents"] == 1_000_000
