"""Best-effort inventory decrements after a committed write"""

from typing import Iterable, List

from bijoux_ledger.domain.exceptions import InventoryAdjustmentError
from bijoux_ledger.domain.inventory import InventoryAdjuster
from bijoux_ledger.domain.models import LineItem, SecondaryEffectFailure
from bijoux_ledger.infrastructure.observability.logging import log_secondary_failure
from bijoux_ledger.infrastructure.observability.metrics import secondary_failure_counter

INVENTORY_DECREMENT = "inventory_decrement"


def decrement_inventory(inventory: InventoryAdjuster, line_items: Iterable[LineItem]) -> List[SecondaryEffectFailure]:
    """
    Decrement stock for each line, collecting failures instead of raising.

    The primary transaction has already committed; a lagging inventory count
    is reported to the caller but never undoes the payment or sale.
    """
    failures = []
    for item in line_items:
        try:
            inventory.decrement_stock(item.name, item.quantity)
        except Exception as e:
            # Adjusters are external collaborators; nothing they raise may reach the caller
            detail = str(e) if isinstance(e, InventoryAdjustmentError) else f"{type(e).__name__}: {e}"
            failure = SecondaryEffectFailure(effect=INVENTORY_DECREMENT, target=item.name, detail=detail)
            secondary_failure_counter.labels(effect=INVENTORY_DECREMENT).inc()
            log_secondary_failure(failure.effect, failure.target, failure.detail)
            failures.append(failure)
    return failures
