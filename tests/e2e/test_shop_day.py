"""
E2E tests walking through a trading day in the shop.

Customer personas:
- aline: takes two pieces on credit, pays in two installments
- eric: pays cash on the spot
- claudine: overpays a small debt
- jeanne: contact only, never owes anything

Each test drives the public API only, the way the shop front end does.
"""

from fastapi.testclient import TestClient


def _summary(client: TestClient) -> dict:
    response = client.get("/v1/summary")
    assert response.status_code == 200
    return response.json()


def test_full_trading_day(client: TestClient, inventory, clock):
    """
    Morning: capital declared, three customers served.
    Evening: totals match what came through the till.
    """
    client.put("/v1/settings/capital", json={"amount_cents": 5_000_000})

    aline = client.post(
        "/v1/debts",
        json={
            "customer_name": "Aline",
            "amount_cents": 2_000_000,
            "phone": "0781234567",
            "line_items": [{"name": "Bague en or", "quantity": 1}, {"name": "Boucles", "quantity": 2}],
        },
    ).json()
    assert aline["debt"]["items_description"] == "Bague en or, Boucles"
    assert aline["notification"]["message"].startswith("Muraho mufashe Bague en or, Boucles")

    clock.advance(hours=1)
    eric = client.post(
        "/v1/debts",
        json={
            "customer_name": "Eric",
            "amount_cents": 300_000,
            "phone": "0788000000",
            "line_items": [{"name": "Chaine", "quantity": 1}],
            "paid_now": True,
        },
    ).json()
    assert eric["debt"]["is_paid"] is True
    assert "cash" in eric["notification"]["message"]

    clock.advance(hours=1)
    claudine = client.post(
        "/v1/debts", json={"customer_name": "Claudine", "amount_cents": 500_000, "items_description": "Bracelet"}
    ).json()
    clock.advance(minutes=5)
    client.post("/v1/clients", json={"name": "Jeanne", "phone": "0781112222"})

    midday = _summary(client)
    assert midday["total_unpaid_cents"] == 2_500_000
    assert midday["unpaid_customer_count"] == 2
    assert midday["total_collected_cents"] == 300_000

    clock.advance(hours=2)
    first = client.post(f"/v1/debts/{aline['debt']['id']}/payments", json={"amount_cents": 1_200_000}).json()
    assert first["remaining_cents"] == 800_000
    assert "8,000 FRW" in first["message"]

    over = client.post(f"/v1/debts/{claudine['debt']['id']}/payments", json={"amount_cents": 700_000}).json()
    assert over["fully_settled"] is True
    assert over["debt"]["amount_owed_cents"] == 0

    reminder = client.get(f"/v1/debts/{aline['debt']['id']}/reminder").json()
    assert reminder["message"].endswith("8,000 FRW")

    clock.advance(hours=3)
    last = client.post(f"/v1/debts/{aline['debt']['id']}/payments", json={"amount_cents": 800_000}).json()
    assert last["fully_settled"] is True

    client.post("/v1/sales", json={"item_name": "Pendentif", "unit_sale_price_cents": 400_000, "unit_cost_cents": 250_000})
    client.put("/v1/settings/balances/2026-03-14", json={"amount_cents": 3_400_000})

    evening = _summary(client)
    assert evening["total_unpaid_cents"] == 0
    assert evening["unpaid_customer_count"] == 0
    # 3,000 cash + 12,000 + 7,000 + 8,000 on debts + 4,000 sale
    assert evening["total_collected_cents"] == 3_400_000
    assert evening["profit_cents"] == 3_400_000 - 5_000_000

    assert ("Bague en or", 1) in inventory.decrements
    assert ("Boucles", 2) in inventory.decrements
    assert ("Chaine", 1) in inventory.decrements
    assert ("Pendentif", 1) in inventory.decrements

    clients = [c["name"] for c in client.get("/v1/clients").json()]
    assert clients == ["Jeanne", "Claudine", "Eric", "Aline"]


def test_new_cycle_reopens_paid_debts(client: TestClient, clock):
    """
    End of period: the shop starts a new cycle. Paid debts come back at
    their original amount, contacts stay untouched.
    """
    debt = client.post(
        "/v1/debts", json={"customer_name": "Aline", "amount_cents": 1_000_000, "items_description": "Collier"}
    ).json()["debt"]
    client.post(f"/v1/debts/{debt['id']}/settle-with-cost", json={"cost_cents": 600_000})
    client.post("/v1/clients", json={"name": "Jeanne"})
    client.put("/v1/settings/capital", json={"amount_cents": 600_000})

    before = _summary(client)
    assert before["profit_cents"] == 400_000

    report = client.post("/v1/maintenance/reset-cycle").json()
    assert report["prior_collected_cents"] == 1_000_000
    assert report["sales_deleted"] == 1

    after = _summary(client)
    assert after["total_collected_cents"] == 0
    assert after["total_capital_cents"] == 0
    assert after["total_unpaid_cents"] == 1_000_000
    assert after["unpaid_customer_count"] == 1
    assert client.get("/v1/sales/summary").json()["sale_count"] == 0
