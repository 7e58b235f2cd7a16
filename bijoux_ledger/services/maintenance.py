"""Scoped reset operations

Three independent resets, each in a single transaction:

    money    capital and collected set to 0; everything else kept
    cycle    sales deleted, money zeroed, paid debts reopened at their
             original amount (contact-only entries untouched)
    factory  sales deleted, money zeroed, daily balances cleared; all
             debts kept as they are
"""

from sqlalchemy.orm import Session

from bijoux_ledger.domain.models import ResetReport
from bijoux_ledger.infrastructure.database.repositories import (
    DebtRepository,
    FinancialSettingsRepository,
    SaleRepository,
)
from bijoux_ledger.infrastructure.database.session import transaction
from bijoux_ledger.infrastructure.observability.logging import log_reset
from bijoux_ledger.infrastructure.observability.metrics import reset_counter
from bijoux_ledger.utils.date_utils import Clock, utc_now

SCOPE_MONEY = "money"
SCOPE_CYCLE = "cycle"
SCOPE_FACTORY = "factory"


class MaintenanceService:
    def __init__(self, db: Session, clock: Clock = utc_now):
        self.db = db
        self.clock = clock
        self.debts = DebtRepository(db)
        self.sales = SaleRepository(db)
        self.finance = FinancialSettingsRepository(db)

    def reset_money_only(self) -> ResetReport:
        with transaction(self.db):
            report = self._begin(SCOPE_MONEY)
            self.finance.zero_money(self.clock())
        return self._finish(report)

    def reset_cycle(self) -> ResetReport:
        with transaction(self.db):
            report = self._begin(SCOPE_CYCLE)
            now = self.clock()
            report.sales_deleted = self.sales.delete_all()
            self.finance.zero_money(now)
            report.debts_reverted = self.debts.revert_paid_debts(now)
        return self._finish(report)

    def factory_reset(self) -> ResetReport:
        with transaction(self.db):
            report = self._begin(SCOPE_FACTORY)
            report.sales_deleted = self.sales.delete_all()
            self.finance.zero_money(self.clock())
            report.balances_cleared = self.finance.clear_daily_balances()
        return self._finish(report)

    def _begin(self, scope: str) -> ResetReport:
        """Capture and log prior totals before anything is cleared"""
        prior = self.finance.get_settings()
        sale_count = self.sales.totals()[2]
        log_reset(scope, prior.total_capital_cents, prior.total_collected_cents, sale_count)
        return ResetReport(
            scope=scope,
            prior_capital_cents=prior.total_capital_cents,
            prior_collected_cents=prior.total_collected_cents,
        )

    def _finish(self, report: ResetReport) -> ResetReport:
        reset_counter.labels(scope=report.scope).inc()
        return report
