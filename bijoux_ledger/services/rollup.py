"""Aggregate rollup: unpaid totals, collected money, capital and profit"""

from datetime import date
from typing import Dict

from sqlalchemy.orm import Session

from bijoux_ledger.domain.exceptions import InvalidAmountError
from bijoux_ledger.domain.models import FinancialSettings, SalesSummary, SummarySnapshot
from bijoux_ledger.domain.money import require_positive
from bijoux_ledger.infrastructure.database.repositories import (
    FinancialSettingsRepository,
    SaleRepository,
    SummaryRepository,
)
from bijoux_ledger.infrastructure.database.session import transaction
from bijoux_ledger.utils.date_utils import Clock, utc_now


def _require_non_negative(amount_cents: int, what: str) -> int:
    if not isinstance(amount_cents, int) or isinstance(amount_cents, bool) or amount_cents < 0:
        raise InvalidAmountError(f"{what} must be a non-negative number of cents, got {amount_cents!r}")
    return amount_cents


class LedgerRollup:
    """Reads totals and maintains operator-entered financial settings"""

    def __init__(self, db: Session, clock: Clock = utc_now):
        self.db = db
        self.clock = clock
        self.summary = SummaryRepository(db)
        self.sales = SaleRepository(db)
        self.finance = FinancialSettingsRepository(db)

    def compute_summary(self) -> SummarySnapshot:
        """
        Totals for the dashboard.

        Capital is whatever the operator declared, not the cost of stock.
        Profit is collected minus capital and may be negative.
        """
        total_unpaid, count, capital, collected = self.summary.snapshot()
        return SummarySnapshot(
            total_unpaid_cents=total_unpaid,
            unpaid_customer_count=count,
            total_collected_cents=collected,
            total_capital_cents=capital,
            profit_cents=collected - capital,
        )

    def sales_summary(self) -> SalesSummary:
        revenue, cost, count = self.sales.totals()
        return SalesSummary(revenue_cents=revenue, cost_cents=cost, profit_cents=revenue - cost, sale_count=count)

    def get_settings(self) -> FinancialSettings:
        with transaction(self.db):
            return self.finance.get_settings()

    def set_capital(self, amount_cents: int) -> FinancialSettings:
        _require_non_negative(amount_cents, "capital")
        with transaction(self.db):
            self.finance.set_capital(amount_cents, self.clock())
        return self.get_settings()

    def add_capital(self, amount_cents: int) -> FinancialSettings:
        """Atomic increment for money newly invested in stock"""
        require_positive(amount_cents, "capital")
        with transaction(self.db):
            self.finance.increment_capital(amount_cents, self.clock())
        return self.get_settings()

    def list_daily_balances(self) -> Dict[date, int]:
        """End-of-day cash counts by date, oldest first"""
        return self.finance.list_daily_balances()

    def set_daily_balance(self, balance_date: date, amount_cents: int) -> FinancialSettings:
        """Record the end-of-day cash count, replacing any earlier entry for that date"""
        _require_non_negative(amount_cents, "balance")
        with transaction(self.db):
            self.finance.set_daily_balance(balance_date, amount_cents)
        return self.get_settings()
