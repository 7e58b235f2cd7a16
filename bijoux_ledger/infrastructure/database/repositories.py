"""Data access layer for ledger entities"""

import uuid
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple
from sqlalchemy import and_, func, not_, or_, select
from sqlalchemy.orm import Session
from bijoux_ledger.infrastructure.database.models import (
    SETTINGS_ROW_ID,
    DailyBalanceRow,
    DebtLineItemRow,
    DebtRecordRow,
    FinancialSettingsRow,
    SaleRecordRow,
)
from bijoux_ledger.domain.exceptions import ConcurrentModificationError
from bijoux_ledger.domain.models import DebtRecord, FinancialSettings, LineItem, SaleRecord


def to_debt_record(row: DebtRecordRow) -> DebtRecord:
    """Map ORM row to domain dataclass"""
    return DebtRecord(
        id=row.id,
        customer_name=row.customer_name,
        phone=row.phone,
        items_description=row.items_description,
        amount_owed_cents=row.amount_owed_cents,
        original_amount_cents=row.original_amount_cents,
        is_paid=row.is_paid,
        paid_at=row.paid_at,
        due_date=row.due_date,
        version=row.version,
        created_at=row.created_at,
        updated_at=row.updated_at,
        line_items=[LineItem(name=li.name, quantity=li.quantity) for li in row.line_items],
    )


def to_sale_record(row: SaleRecordRow) -> SaleRecord:
    return SaleRecord(
        id=row.id,
        item_name=row.item_name,
        unit_cost_cents=row.unit_cost_cents,
        unit_sale_price_cents=row.unit_sale_price_cents,
        quantity=row.quantity,
        date_sold=row.date_sold,
        debt_id=row.debt_id,
    )


def _contains_pattern(text: str) -> str:
    """LIKE pattern matching ``text`` literally anywhere; \\ is the escape character"""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


# Contact-only client entries: no items, never owed anything
_contact_only = and_(DebtRecordRow.original_amount_cents == 0, DebtRecordRow.items_description == "")


class DebtRepository:
    """Repository for customer debts"""

    def __init__(self, db: Session):
        self.db = db

    def create_debt(
        self,
        customer_name: str,
        phone: Optional[str],
        items_description: str,
        amount_owed_cents: int,
        original_amount_cents: int,
        is_paid: bool,
        paid_at: Optional[datetime],
        due_date: Optional[date],
        line_items: Iterable[LineItem],
        now: datetime,
    ) -> DebtRecordRow:
        """Persist a new debt with its line items"""
        db_debt = DebtRecordRow(
            customer_name=customer_name,
            phone=phone,
            items_description=items_description,
            amount_owed_cents=amount_owed_cents,
            original_amount_cents=original_amount_cents,
            is_paid=is_paid,
            paid_at=paid_at,
            due_date=due_date,
            version=1,
            created_at=now,
            updated_at=now,
        )
        for position, item in enumerate(line_items):
            db_debt.line_items.append(
                DebtLineItemRow(position=position, name=item.name, quantity=item.quantity)
            )
        self.db.add(db_debt)
        self.db.flush()  # Get ID without committing
        return db_debt

    def get_debt(self, debt_id: uuid.UUID, fresh: bool = False) -> Optional[DebtRecordRow]:
        """Fetch a debt; ``fresh`` overwrites any copy already in the session"""
        query = self.db.query(DebtRecordRow).filter(DebtRecordRow.id == debt_id)
        if fresh:
            query = query.populate_existing()
        return query.first()

    def list_unpaid(self, search: str = "", offset: int = 0, limit: int = 20) -> List[DebtRecordRow]:
        """Unpaid debts, newest first, optionally filtered by name, items or phone"""
        query = self.db.query(DebtRecordRow).filter(DebtRecordRow.is_paid.is_(False))
        if search:
            pattern = _contains_pattern(search.lower())
            query = query.filter(
                or_(
                    func.lower(DebtRecordRow.customer_name).like(pattern, escape="\\"),
                    func.lower(DebtRecordRow.items_description).like(pattern, escape="\\"),
                    DebtRecordRow.phone.like(_contains_pattern(search), escape="\\"),
                )
            )
        return (
            query.order_by(DebtRecordRow.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    def list_newest_first(self) -> List[DebtRecordRow]:
        return self.db.query(DebtRecordRow).order_by(DebtRecordRow.created_at.desc()).all()

    def find_by_name(self, name: str) -> List[DebtRecordRow]:
        """Case-insensitive exact name match"""
        return (
            self.db.query(DebtRecordRow)
            .filter(func.lower(DebtRecordRow.customer_name) == name.lower())
            .all()
        )

    def delete_debt(self, db_debt: DebtRecordRow) -> None:
        self.db.delete(db_debt)
        self.db.flush()

    def delete_contacts_by_name(self, name: str) -> int:
        rows = (
            self.db.query(DebtRecordRow)
            .filter(func.lower(DebtRecordRow.customer_name) == name.lower(), _contact_only)
            .all()
        )
        for row in rows:
            self.db.delete(row)
        self.db.flush()
        return len(rows)

    def update_balance(
        self,
        debt_id: uuid.UUID,
        expected_version: int,
        amount_owed_cents: int,
        is_paid: bool,
        paid_at: Optional[datetime],
        now: datetime,
    ) -> None:
        """
        Conditional write: only applies if the row still has ``expected_version``
        and is unpaid.

        Raises:
            ConcurrentModificationError: Another writer changed the row first
        """
        updated = (
            self.db.query(DebtRecordRow)
            .filter(
                DebtRecordRow.id == debt_id,
                DebtRecordRow.version == expected_version,
                DebtRecordRow.is_paid.is_(False),
            )
            .update(
                {
                    DebtRecordRow.amount_owed_cents: amount_owed_cents,
                    DebtRecordRow.is_paid: is_paid,
                    DebtRecordRow.paid_at: paid_at,
                    DebtRecordRow.version: DebtRecordRow.version + 1,
                    DebtRecordRow.updated_at: now,
                },
                synchronize_session=False,
            )
        )
        if updated != 1:
            raise ConcurrentModificationError(
                f"Debt {debt_id} changed since version {expected_version} was read"
            )

    def revert_paid_debts(self, now: datetime) -> int:
        """Reopen settled debts at their original amount; contact-only rows are left alone"""
        return (
            self.db.query(DebtRecordRow)
            .filter(DebtRecordRow.is_paid.is_(True), not_(_contact_only))
            .update(
                {
                    DebtRecordRow.is_paid: False,
                    DebtRecordRow.paid_at: None,
                    DebtRecordRow.amount_owed_cents: DebtRecordRow.original_amount_cents,
                    DebtRecordRow.version: DebtRecordRow.version + 1,
                    DebtRecordRow.updated_at: now,
                },
                synchronize_session=False,
            )
        )

    def update_phone_by_name(self, name: str, phone: str, now: datetime) -> int:
        return (
            self.db.query(DebtRecordRow)
            .filter(func.lower(DebtRecordRow.customer_name) == name.lower())
            .update(
                {DebtRecordRow.phone: phone, DebtRecordRow.updated_at: now},
                synchronize_session=False,
            )
        )


class SaleRepository:
    """Repository for sales history"""

    def __init__(self, db: Session):
        self.db = db

    def create_sale(
        self,
        item_name: str,
        unit_cost_cents: int,
        unit_sale_price_cents: int,
        quantity: int,
        date_sold: date,
        debt_id: Optional[uuid.UUID] = None,
    ) -> SaleRecordRow:
        db_sale = SaleRecordRow(
            item_name=item_name,
            unit_cost_cents=unit_cost_cents,
            unit_sale_price_cents=unit_sale_price_cents,
            quantity=quantity,
            date_sold=date_sold,
            debt_id=debt_id,
        )
        self.db.add(db_sale)
        self.db.flush()
        return db_sale

    def list_sales(self, limit: int = 100) -> List[SaleRecordRow]:
        """Most recent sales first"""
        return (
            self.db.query(SaleRecordRow)
            .order_by(SaleRecordRow.date_sold.desc(), SaleRecordRow.created_at.desc())
            .limit(limit)
            .all()
        )

    def totals(self) -> Tuple[int, int, int]:
        """(revenue, cost, number of sales)"""
        revenue, cost, count = self.db.query(
            func.coalesce(func.sum(SaleRecordRow.unit_sale_price_cents * SaleRecordRow.quantity), 0),
            func.coalesce(func.sum(SaleRecordRow.unit_cost_cents * SaleRecordRow.quantity), 0),
            func.count(SaleRecordRow.id),
        ).one()
        return int(revenue), int(cost), int(count)

    def delete_all(self) -> int:
        return self.db.query(SaleRecordRow).delete(synchronize_session=False)


class FinancialSettingsRepository:
    """Repository for capital, collected money and daily balances"""

    def __init__(self, db: Session):
        self.db = db

    def _ensure_row(self) -> None:
        # init_db seeds the row; this only covers databases created some other way
        if self.db.get(FinancialSettingsRow, SETTINGS_ROW_ID) is None:
            self.db.add(
                FinancialSettingsRow(id=SETTINGS_ROW_ID, total_capital_cents=0, total_collected_cents=0)
            )
            self.db.flush()

    def get_settings(self) -> FinancialSettings:
        self._ensure_row()
        row = self.db.get(FinancialSettingsRow, SETTINGS_ROW_ID)
        self.db.refresh(row)  # Increments bypass the identity map
        balances = self.list_daily_balances()
        return FinancialSettings(
            total_capital_cents=row.total_capital_cents,
            total_collected_cents=row.total_collected_cents,
            daily_balances=balances,
        )

    def _update(self, values: dict, now: datetime) -> None:
        self._ensure_row()
        values[FinancialSettingsRow.updated_at] = now
        self.db.query(FinancialSettingsRow).filter(FinancialSettingsRow.id == SETTINGS_ROW_ID).update(
            values, synchronize_session=False
        )

    def increment_collected(self, delta_cents: int, now: datetime) -> None:
        """Atomic SQL increment, never read-modify-write"""
        self._update(
            {FinancialSettingsRow.total_collected_cents: FinancialSettingsRow.total_collected_cents + delta_cents},
            now,
        )

    def increment_capital(self, delta_cents: int, now: datetime) -> None:
        self._update(
            {FinancialSettingsRow.total_capital_cents: FinancialSettingsRow.total_capital_cents + delta_cents},
            now,
        )

    def set_capital(self, amount_cents: int, now: datetime) -> None:
        self._update({FinancialSettingsRow.total_capital_cents: amount_cents}, now)

    def zero_money(self, now: datetime) -> None:
        self._update(
            {
                FinancialSettingsRow.total_capital_cents: 0,
                FinancialSettingsRow.total_collected_cents: 0,
            },
            now,
        )

    def list_daily_balances(self) -> Dict[date, int]:
        return {
            b.balance_date: b.amount_cents
            for b in self.db.query(DailyBalanceRow).order_by(DailyBalanceRow.balance_date).all()
        }

    def set_daily_balance(self, balance_date: date, amount_cents: int) -> None:
        self.db.merge(DailyBalanceRow(balance_date=balance_date, amount_cents=amount_cents))
        self.db.flush()

    def clear_daily_balances(self) -> int:
        return self.db.query(DailyBalanceRow).delete(synchronize_session=False)


class SummaryRepository:
    """Read-only aggregate queries"""

    def __init__(self, db: Session):
        self.db = db

    def snapshot(self) -> Tuple[int, int, int, int]:
        """
        (total unpaid, unpaid count, capital, collected) in a single SELECT,
        so a settlement committing mid-read cannot be half visible.
        """
        unpaid = DebtRecordRow.is_paid.is_(False)
        settings_row = FinancialSettingsRow.id == SETTINGS_ROW_ID
        statement = select(
            select(func.coalesce(func.sum(DebtRecordRow.amount_owed_cents), 0)).where(unpaid).scalar_subquery(),
            select(func.count(DebtRecordRow.id)).where(unpaid).scalar_subquery(),
            func.coalesce(
                select(FinancialSettingsRow.total_capital_cents).where(settings_row).scalar_subquery(), 0
            ),
            func.coalesce(
                select(FinancialSettingsRow.total_collected_cents).where(settings_row).scalar_subquery(), 0
            ),
        )
        total_unpaid, count, capital, collected = self.db.execute(statement).one()
        return int(total_unpaid), int(count), int(capital), int(collected)
