"""Debt record store: recording debts and client contacts, listing, reminders"""

import uuid
from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from bijoux_ledger.config import settings
from bijoux_ledger.domain.exceptions import (
    DebtNotFoundError,
    InvalidAmountError,
    MissingContactError,
)
from bijoux_ledger.domain.inventory import InventoryAdjuster, NullInventoryAdjuster
from bijoux_ledger.domain.models import DebtEntry, DebtRecord, LineItem, NotificationDraft
from bijoux_ledger.domain.money import require_positive
from bijoux_ledger.domain.validation import optional_text, require_text
from bijoux_ledger.domain.notifications import (
    MessageCatalog,
    compose_cash_acknowledgment,
    compose_debt_confirmation,
    compose_debt_reminder,
    normalize_phone,
)
from bijoux_ledger.infrastructure.database.repositories import (
    DebtRepository,
    FinancialSettingsRepository,
    to_debt_record,
)
from bijoux_ledger.infrastructure.database.session import transaction
from bijoux_ledger.infrastructure.observability.metrics import collected_amount_counter
from bijoux_ledger.services.settlement import default_catalog
from bijoux_ledger.services.side_effects import decrement_inventory
from bijoux_ledger.utils.date_utils import Clock, utc_now


def _clean_line_items(line_items: Iterable[LineItem]) -> List[LineItem]:
    cleaned = []
    for item in line_items:
        if item.quantity < 1:
            raise InvalidAmountError(f"Quantity for {item.name!r} must be at least 1")
        cleaned.append(LineItem(name=require_text(item.name, "item name"), quantity=item.quantity))
    return cleaned


def _draft(phone: Optional[str], message: str) -> Optional[NotificationDraft]:
    if phone is None:
        return None
    return NotificationDraft(phone=phone, international_phone=normalize_phone(phone), message=message)


class DebtService:
    """Creates, finds and deletes debt records"""

    def __init__(
        self,
        db: Session,
        inventory: InventoryAdjuster | None = None,
        clock: Clock = utc_now,
        catalog: MessageCatalog | None = None,
    ):
        self.db = db
        self.inventory = inventory or NullInventoryAdjuster()
        self.clock = clock
        self.catalog = catalog or default_catalog()
        self.debts = DebtRepository(db)
        self.finance = FinancialSettingsRepository(db)

    def record_debt(
        self,
        customer_name: str,
        amount_cents: int,
        items_description: str = "",
        phone: Optional[str] = None,
        due_date: Optional[date] = None,
        line_items: Iterable[LineItem] = (),
        paid_now: bool = False,
    ) -> DebtEntry:
        """
        Record what a customer took and owes.

        With ``paid_now`` the customer paid on the spot: the record is stored
        as settled and the amount counts as collected immediately.
        """
        name = require_text(customer_name)
        require_positive(amount_cents, "debt amount")
        items = _clean_line_items(line_items)
        description = (items_description or "").strip() or ", ".join(i.name for i in items)
        phone = optional_text(phone)

        with transaction(self.db):
            now = self.clock()
            row = self.debts.create_debt(
                customer_name=name,
                phone=phone,
                items_description=description,
                amount_owed_cents=0 if paid_now else amount_cents,
                original_amount_cents=amount_cents,
                is_paid=paid_now,
                paid_at=now if paid_now else None,
                due_date=due_date,
                line_items=items,
                now=now,
            )
            if paid_now:
                self.finance.increment_collected(amount_cents, now)

        debt = to_debt_record(row)
        if paid_now:
            collected_amount_counter.labels(source="debt").inc(amount_cents)
            return DebtEntry(
                debt=debt,
                notification=_draft(phone, compose_cash_acknowledgment(self.catalog)),
                secondary_failures=decrement_inventory(self.inventory, debt.line_items),
            )

        message = compose_debt_confirmation(debt.items_description, amount_cents, self.catalog)
        return DebtEntry(debt=debt, notification=_draft(phone, message))

    def record_contact(self, name: str, phone: Optional[str] = None) -> DebtRecord:
        """
        Add a client without a debt, or update the phone of a known client.

        Contact-only entries are stored settled so they never show as owing.
        """
        name = require_text(name)
        phone = optional_text(phone)

        with transaction(self.db):
            now = self.clock()
            existing = self.debts.find_by_name(name)
            if existing:
                if phone:
                    self.debts.update_phone_by_name(name, phone, now)
                row = max(existing, key=lambda r: r.created_at)
            else:
                row = self.debts.create_debt(
                    customer_name=name,
                    phone=phone,
                    items_description="",
                    amount_owed_cents=0,
                    original_amount_cents=0,
                    is_paid=True,
                    paid_at=now,
                    due_date=None,
                    line_items=(),
                    now=now,
                )
        return to_debt_record(self.debts.get_debt(row.id, fresh=True))

    def list_clients(self) -> List[DebtRecord]:
        """One entry per customer name (case-insensitive), newest first"""
        seen = set()
        clients = []
        for row in self.debts.list_newest_first():
            key = row.customer_name.lower()
            if key not in seen:
                seen.add(key)
                clients.append(to_debt_record(row))
        return clients

    def delete_contact(self, name: str) -> int:
        """Delete contact-only entries for a name; real debts are kept"""
        with transaction(self.db):
            return self.debts.delete_contacts_by_name(require_text(name))

    def get_debt(self, debt_id: uuid.UUID) -> DebtRecord:
        row = self.debts.get_debt(debt_id)
        if row is None:
            raise DebtNotFoundError(f"Debt {debt_id} not found")
        return to_debt_record(row)

    def list_unpaid(self, search: str = "", page: int = 0, page_size: Optional[int] = None) -> List[DebtRecord]:
        size = page_size or settings.unpaid_page_size
        rows = self.debts.list_unpaid(search.strip(), offset=max(page, 0) * size, limit=size)
        return [to_debt_record(r) for r in rows]

    def delete_debt(self, debt_id: uuid.UUID) -> None:
        with transaction(self.db):
            row = self.debts.get_debt(debt_id)
            if row is None:
                raise DebtNotFoundError(f"Debt {debt_id} not found")
            self.debts.delete_debt(row)

    def reminder_for(self, debt_id: uuid.UUID) -> NotificationDraft:
        """
        Draft a reminder for the outstanding balance.

        Raises:
            DebtNotFoundError: No such debt
            MissingContactError: Customer has no phone
        """
        debt = self.get_debt(debt_id)
        if debt.phone is None:
            raise MissingContactError(f"{debt.customer_name} has no phone number")
        message = compose_debt_reminder(debt.items_description, debt.amount_owed_cents, self.catalog)
        return _draft(debt.phone, message)
