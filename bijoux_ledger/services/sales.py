"""Point-of-sale entry"""

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from bijoux_ledger.domain.inventory import InventoryAdjuster, NullInventoryAdjuster
from bijoux_ledger.domain.models import LineItem, SaleEntry, SaleRecord
from bijoux_ledger.domain.money import require_cost, require_positive
from bijoux_ledger.domain.validation import require_text
from bijoux_ledger.infrastructure.database.repositories import (
    FinancialSettingsRepository,
    SaleRepository,
    to_sale_record,
)
from bijoux_ledger.infrastructure.database.session import transaction
from bijoux_ledger.infrastructure.observability.metrics import collected_amount_counter
from bijoux_ledger.services.side_effects import decrement_inventory
from bijoux_ledger.utils.date_utils import Clock, today_from, utc_now


class SalesService:
    """Records direct sales; the money counts as collected immediately"""

    def __init__(self, db: Session, inventory: InventoryAdjuster | None = None, clock: Clock = utc_now):
        self.db = db
        self.inventory = inventory or NullInventoryAdjuster()
        self.clock = clock
        self.sales = SaleRepository(db)
        self.finance = FinancialSettingsRepository(db)

    def record_sale(
        self,
        item_name: str,
        unit_sale_price_cents: int,
        quantity: int = 1,
        unit_cost_cents: int = 0,
        date_sold: Optional[date] = None,
        decrement_stock: bool = True,
    ) -> SaleEntry:
        """
        Insert the sale and add its revenue to collected money in one
        transaction, then take the units out of stock.
        """
        name = require_text(item_name, "item name")
        require_positive(unit_sale_price_cents, "sale price")
        require_positive(quantity, "quantity")
        require_cost(unit_cost_cents)

        with transaction(self.db):
            now = self.clock()
            row = self.sales.create_sale(
                item_name=name,
                unit_cost_cents=unit_cost_cents,
                unit_sale_price_cents=unit_sale_price_cents,
                quantity=quantity,
                date_sold=date_sold or today_from(self.clock),
            )
            self.finance.increment_collected(unit_sale_price_cents * quantity, now)

        sale = to_sale_record(row)
        collected_amount_counter.labels(source="sale").inc(unit_sale_price_cents * quantity)

        secondary = []
        if decrement_stock:
            secondary = decrement_inventory(self.inventory, [LineItem(name=name, quantity=quantity)])
        return SaleEntry(sale=sale, secondary_failures=secondary)

    def list_sales(self, limit: int = 100) -> List[SaleRecord]:
        return [to_sale_record(r) for r in self.sales.list_sales(limit)]
