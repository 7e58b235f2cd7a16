"""Domain models - pure Python dataclasses representing business entities"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional


@dataclass
class LineItem:
    """Inventory line attached to a debt"""

    name: str
    quantity: int = 1


@dataclass
class DebtRecord:
    """One customer obligation"""

    id: uuid.UUID
    customer_name: str
    phone: Optional[str]
    items_description: str
    amount_owed_cents: int
    original_amount_cents: int
    is_paid: bool
    paid_at: Optional[datetime]
    due_date: Optional[date]
    version: int
    created_at: datetime
    updated_at: datetime
    line_items: List[LineItem] = field(default_factory=list)

    @property
    def is_contact_only(self) -> bool:
        """Client entry with no debt behind it"""
        return self.original_amount_cents == 0 and not self.items_description


@dataclass
class SaleRecord:
    """Realized sale transaction"""

    id: uuid.UUID
    item_name: str
    unit_cost_cents: int
    unit_sale_price_cents: int
    quantity: int
    date_sold: date
    debt_id: Optional[uuid.UUID] = None

    @property
    def profit_cents(self) -> int:
        return (self.unit_sale_price_cents - self.unit_cost_cents) * self.quantity


@dataclass
class FinancialSettings:
    """Operator-declared and accumulated business totals"""

    total_capital_cents: int
    total_collected_cents: int
    daily_balances: Dict[date, int] = field(default_factory=dict)

    @property
    def profit_cents(self) -> int:
        # Derived on every read; never stored
        return self.total_collected_cents - self.total_capital_cents


@dataclass
class SecondaryEffectFailure:
    """Side effect that failed after the primary write committed"""

    effect: str  # "inventory_decrement"
    target: str
    detail: str


@dataclass
class NotificationDraft:
    """Composed outbound message; transport is the caller's business"""

    phone: str
    international_phone: str
    message: str


@dataclass
class SettlementOutcome:
    """Result of the pure settlement computation"""

    remaining_cents: int
    fully_settled: bool
    collected_cents: int


@dataclass
class SettlementResult:
    """Output of applying a payment to a debt"""

    debt: DebtRecord
    message: str
    fully_settled: bool
    payment_cents: int
    remaining_cents: int
    secondary_failures: List[SecondaryEffectFailure] = field(default_factory=list)


@dataclass
class CostBasisSettlement:
    """Output of settling a debt together with a profit-bearing sale"""

    debt: DebtRecord
    sale: SaleRecord
    profit_cents: int
    message: str
    secondary_failures: List[SecondaryEffectFailure] = field(default_factory=list)


@dataclass
class SaleEntry:
    """Output of recording a direct sale"""

    sale: SaleRecord
    secondary_failures: List[SecondaryEffectFailure] = field(default_factory=list)


@dataclass
class DebtEntry:
    """Output of recording a debt"""

    debt: DebtRecord
    notification: Optional[NotificationDraft] = None
    secondary_failures: List[SecondaryEffectFailure] = field(default_factory=list)


@dataclass
class SummarySnapshot:
    """Consistent view of the ledger totals"""

    total_unpaid_cents: int
    unpaid_customer_count: int
    total_collected_cents: int
    total_capital_cents: int
    profit_cents: int


@dataclass
class SalesSummary:
    """Totals over all recorded sales"""

    revenue_cents: int
    cost_cents: int
    profit_cents: int
    sale_count: int


@dataclass
class ResetReport:
    """What a maintenance reset cleared"""

    scope: str
    prior_capital_cents: int
    prior_collected_cents: int
    sales_deleted: int = 0
    debts_reverted: int = 0
    balances_cleared: int = 0
