"""Unit tests for the SQL and HTTP inventory adjusters"""

import json
import httpx
import pytest
from bijoux_ledger.domain.exceptions import InventoryAdjustmentError
from bijoux_ledger.domain.models import LineItem
from bijoux_ledger.infrastructure.clients.inventory import InventoryClient
from bijoux_ledger.infrastructure.database.inventory import SqlInventoryAdjuster
from bijoux_ledger.infrastructure.database.models import InventoryItemRow
from bijoux_ledger.services.debts import DebtService
from bijoux_ledger.services.settlement import SettlementEngine


@pytest.fixture
def stocked(session_factory):
    db = session_factory()
    db.add(InventoryItemRow(name="Bague en or", quantity_on_hand=3, unit_cost_cents=200_000))
    db.commit()
    db.close()
    return SqlInventoryAdjuster(session_factory)


def _on_hand(session_factory, name):
    db = session_factory()
    try:
        return db.query(InventoryItemRow).filter(InventoryItemRow.name == name).one().quantity_on_hand
    finally:
        db.close()


def test_sql_decrement_matches_name_case_insensitively(stocked, session_factory):
    stocked.decrement_stock("BAGUE EN OR", 2)

    assert _on_hand(session_factory, "Bague en or") == 1


def test_sql_decrement_never_goes_negative(stocked, session_factory):
    with pytest.raises(InventoryAdjustmentError):
        stocked.decrement_stock("Bague en or", 4)

    assert _on_hand(session_factory, "Bague en or") == 3


def test_sql_decrement_unknown_item(stocked):
    with pytest.raises(InventoryAdjustmentError):
        stocked.decrement_stock("Montre", 1)


def test_settlement_with_sql_inventory(session_factory, db, clock, stocked):
    debt = DebtService(db, clock=clock).record_debt(
        "Aline", 500_000, line_items=[LineItem("Bague en or", 1), LineItem("Montre", 1)]
    ).debt

    result = SettlementEngine(db, inventory=stocked, clock=clock, backoff_base=0).apply_payment(debt.id, 500_000)

    assert result.fully_settled is True
    assert [f.target for f in result.secondary_failures] == ["Montre"]
    assert _on_hand(session_factory, "Bague en or") == 2


def test_http_client_posts_decrement():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path, json.loads(request.content)))
        return httpx.Response(204)

    client = InventoryClient("http://catalog.test", transport=httpx.MockTransport(handler))
    client.decrement_stock("Collier", 2)

    assert seen == [("POST", "/inventory/decrement", {"item_name": "Collier", "quantity": 2})]


def test_http_client_rejected_decrement():
    client = InventoryClient(
        "http://catalog.test",
        transport=httpx.MockTransport(lambda request: httpx.Response(409, json={"detail": "out of stock"})),
    )

    with pytest.raises(InventoryAdjustmentError):
        client.decrement_stock("Collier", 2)


def test_http_client_retries_connection_failures():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) < 3:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(204)

    client = InventoryClient("http://catalog.test", backoff_base=0, transport=httpx.MockTransport(handler))
    client.decrement_stock("Collier", 1)

    assert len(attempts) == 3


def test_http_client_gives_up_after_max_retries():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = InventoryClient(
        "http://catalog.test", max_retries=2, backoff_base=0, transport=httpx.MockTransport(handler)
    )

    with pytest.raises(InventoryAdjustmentError):
        client.decrement_stock("Collier", 1)


def test_http_client_timeout_is_not_retried():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise httpx.ReadTimeout("slow catalog", request=request)

    client = InventoryClient("http://catalog.test", backoff_base=0, transport=httpx.MockTransport(handler))

    with pytest.raises(InventoryAdjustmentError):
        client.decrement_stock("Collier", 1)
    assert len(attempts) == 1


def test_http_client_transport_error_becomes_adjustment_error():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise httpx.ReadError("connection reset mid-response", request=request)

    client = InventoryClient("http://catalog.test", backoff_base=0, transport=httpx.MockTransport(handler))

    with pytest.raises(InventoryAdjustmentError):
        client.decrement_stock("Collier", 1)
    assert len(attempts) == 1


def test_settlement_survives_catalog_transport_error(db, clock, rollup):
    """A catalog that drops the connection leaves the payment recorded and reported"""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadError("connection reset mid-response", request=request)

    catalog = InventoryClient("http://catalog.test", backoff_base=0, transport=httpx.MockTransport(handler))
    debt = DebtService(db, clock=clock).record_debt("Aline", 400_000, line_items=[LineItem("Collier", 1)]).debt

    result = SettlementEngine(db, inventory=catalog, clock=clock, backoff_base=0).apply_payment(debt.id, 400_000)

    assert result.fully_settled is True
    assert [f.target for f in result.secondary_failures] == ["Collier"]
    assert rollup.compute_summary().total_collected_cents == 400_000
