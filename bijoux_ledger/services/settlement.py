"""Settlement engine: applies payments to customer debts"""

import time
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional, Tuple

from sqlalchemy.orm import Session

from bijoux_ledger.config import settings
from bijoux_ledger.domain.exceptions import (
    AlreadySettledError,
    ConcurrentModificationError,
    DebtNotFoundError,
)
from bijoux_ledger.domain.inventory import InventoryAdjuster, NullInventoryAdjuster
from bijoux_ledger.domain.models import (
    CostBasisSettlement,
    SettlementOutcome,
    SettlementResult,
)
from bijoux_ledger.domain.money import require_cost, require_positive
from bijoux_ledger.domain.notifications import MessageCatalog, compose_thank_you, get_catalog
from bijoux_ledger.domain.settlement import compute_settlement
from bijoux_ledger.infrastructure.database.models import DebtRecordRow
from bijoux_ledger.infrastructure.database.repositories import (
    DebtRepository,
    FinancialSettingsRepository,
    SaleRepository,
    to_debt_record,
    to_sale_record,
)
from bijoux_ledger.infrastructure.database.session import transaction
from bijoux_ledger.infrastructure.observability.logging import log_settlement
from bijoux_ledger.infrastructure.observability.metrics import (
    record_settlement,
    settlement_conflict_counter,
)
from bijoux_ledger.services.side_effects import decrement_inventory
from bijoux_ledger.utils.date_utils import Clock, utc_now

# Hook run inside the settlement transaction, after the debt write
AfterWrite = Callable[[DebtRecordRow, SettlementOutcome, datetime], None]


def default_catalog() -> MessageCatalog:
    return replace(get_catalog(settings.message_locale), currency_label=settings.currency_label)


class SettlementEngine:
    """
    Applies payments to debts.

    Each attempt reads the debt, computes the new balance and writes it back
    conditionally on the version it read, incrementing the collected total in
    the same transaction. A lost race rolls back and retries with fresh state.
    """

    def __init__(
        self,
        db: Session,
        inventory: InventoryAdjuster | None = None,
        clock: Clock = utc_now,
        catalog: MessageCatalog | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
    ):
        self.db = db
        self.inventory = inventory or NullInventoryAdjuster()
        self.clock = clock
        self.catalog = catalog or default_catalog()
        self.max_retries = settings.settlement_max_retries if max_retries is None else max_retries
        self.backoff_base = settings.settlement_backoff_base if backoff_base is None else backoff_base
        self.debts = DebtRepository(db)
        self.finance = FinancialSettingsRepository(db)
        self.sales = SaleRepository(db)

    def apply_payment(
        self,
        debt_id: uuid.UUID,
        payment_cents: int,
        thank_you_template: Optional[str] = None,
    ) -> SettlementResult:
        """
        Apply a payment to an unpaid debt.

        Raises:
            InvalidAmountError: Payment is not positive
            DebtNotFoundError: No such debt
            AlreadySettledError: Debt was already paid (possibly by a concurrent call)
            ConcurrentModificationError: Retries exhausted
            StorageFailureError: Database unavailable
        """
        require_positive(payment_cents, "payment")
        template = thank_you_template or settings.default_thank_you_message

        row, outcome, attempts = self._settle(
            debt_id, lambda r: compute_settlement(r.amount_owed_cents, payment_cents)
        )
        debt = to_debt_record(row)

        secondary = []
        if outcome.fully_settled:
            secondary = decrement_inventory(self.inventory, debt.line_items)

        record_settlement("full" if outcome.fully_settled else "partial", outcome.collected_cents)
        log_settlement(str(debt.id), payment_cents, outcome.remaining_cents, outcome.fully_settled, attempts)

        return SettlementResult(
            debt=debt,
            message=compose_thank_you(template, outcome.remaining_cents, self.catalog),
            fully_settled=outcome.fully_settled,
            payment_cents=payment_cents,
            remaining_cents=outcome.remaining_cents,
            secondary_failures=secondary,
        )

    def mark_fully_paid_with_cost_basis(
        self,
        debt_id: uuid.UUID,
        cost_basis_cents: int,
        thank_you_template: Optional[str] = None,
    ) -> CostBasisSettlement:
        """
        Settle the whole remaining balance and record the debt as a sale.

        The sale is priced at the debt's original amount with the given cost;
        profit is reported even when negative.

        Raises:
            InvalidCostError: Cost basis is negative
            DebtNotFoundError, AlreadySettledError, ConcurrentModificationError, StorageFailureError
        """
        require_cost(cost_basis_cents)
        template = thank_you_template or settings.default_thank_you_message
        created = {}

        def record_sale(r: DebtRecordRow, outcome: SettlementOutcome, now: datetime) -> None:
            created["sale"] = self.sales.create_sale(
                item_name=r.items_description or r.customer_name,
                unit_cost_cents=cost_basis_cents,
                unit_sale_price_cents=r.original_amount_cents,
                quantity=1,
                date_sold=now.date(),
                debt_id=r.id,
            )

        row, outcome, attempts = self._settle(
            debt_id,
            lambda r: SettlementOutcome(remaining_cents=0, fully_settled=True, collected_cents=r.amount_owed_cents),
            after_write=record_sale,
        )
        debt = to_debt_record(row)
        sale = to_sale_record(created["sale"])
        secondary = decrement_inventory(self.inventory, debt.line_items)

        record_settlement("cost_basis", outcome.collected_cents)
        log_settlement(str(debt.id), outcome.collected_cents, 0, True, attempts)

        return CostBasisSettlement(
            debt=debt,
            sale=sale,
            profit_cents=sale.profit_cents,
            message=compose_thank_you(template, None, self.catalog),
            secondary_failures=secondary,
        )

    def _settle(
        self,
        debt_id: uuid.UUID,
        compute: Callable[[DebtRecordRow], SettlementOutcome],
        after_write: Optional[AfterWrite] = None,
    ) -> Tuple[DebtRecordRow, SettlementOutcome, int]:
        """Read-compute-conditional-write loop with exponential backoff"""
        attempt = 0
        while True:
            attempt += 1
            try:
                with transaction(self.db):
                    row = self._load_unpaid(debt_id)
                    outcome = compute(row)
                    now = self.clock()
                    self.debts.update_balance(
                        debt_id=row.id,
                        expected_version=row.version,
                        amount_owed_cents=outcome.remaining_cents,
                        is_paid=outcome.fully_settled,
                        paid_at=now if outcome.fully_settled else None,
                        now=now,
                    )
                    self.finance.increment_collected(outcome.collected_cents, now)
                    if after_write is not None:
                        after_write(row, outcome, now)
                return row, outcome, attempt

            except ConcurrentModificationError:
                settlement_conflict_counter.inc()
                if attempt >= self.max_retries:
                    raise
                time.sleep(self.backoff_base * (2 ** (attempt - 1)))

    def _load_unpaid(self, debt_id: uuid.UUID) -> DebtRecordRow:
        row = self.debts.get_debt(debt_id, fresh=True)
        if row is None:
            raise DebtNotFoundError(f"Debt {debt_id} not found")
        if row.is_paid:
            raise AlreadySettledError(f"Debt {debt_id} is already paid")
        return row
