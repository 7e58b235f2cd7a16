"""SQLAlchemy ORM models for the ledger tables"""

import uuid
from sqlalchemy import (
    Column,
    String,
    BigInteger,
    Boolean,
    Date,
    DateTime,
    Integer,
    ForeignKey,
    Text,
    Uuid,
    CheckConstraint,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

SETTINGS_ROW_ID = 1


class DebtRecordRow(Base):
    """Customer debt (or contact-only client entry)"""

    __tablename__ = "debt_record"
    __table_args__ = (
        CheckConstraint("amount_owed_cents >= 0", name="ck_debt_amount_non_negative"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    customer_name = Column(Text, nullable=False, index=True)
    phone = Column(String(32), nullable=True)
    items_description = Column(Text, nullable=False, default="")
    amount_owed_cents = Column(BigInteger, nullable=False)
    original_amount_cents = Column(BigInteger, nullable=False)
    is_paid = Column(Boolean, nullable=False, default=False, index=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    due_date = Column(Date, nullable=True)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    line_items = relationship(
        "DebtLineItemRow",
        back_populates="debt",
        cascade="all, delete-orphan",
        order_by="DebtLineItemRow.position",
    )


class DebtLineItemRow(Base):
    """Inventory line taken as part of a debt"""

    __tablename__ = "debt_line_item"

    id = Column(Integer, primary_key=True, autoincrement=True)
    debt_id = Column(Uuid, ForeignKey("debt_record.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(Text, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)

    debt = relationship("DebtRecordRow", back_populates="line_items")


class SaleRecordRow(Base):
    """Realized sale"""

    __tablename__ = "sale_record"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    item_name = Column(Text, nullable=False)
    unit_cost_cents = Column(BigInteger, nullable=False, default=0)
    unit_sale_price_cents = Column(BigInteger, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    date_sold = Column(Date, nullable=False)
    # No FK: deleting a debt must not touch sales history
    debt_id = Column(Uuid, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class FinancialSettingsRow(Base):
    """Single-row aggregate of business totals"""

    __tablename__ = "financial_settings"

    id = Column(Integer, primary_key=True, default=SETTINGS_ROW_ID)
    total_capital_cents = Column(BigInteger, nullable=False, default=0)
    total_collected_cents = Column(BigInteger, nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class DailyBalanceRow(Base):
    """Manually entered end-of-day cash count"""

    __tablename__ = "daily_balance"

    balance_date = Column(Date, primary_key=True)
    amount_cents = Column(BigInteger, nullable=False)


class InventoryItemRow(Base):
    """Catalog stock level; only decremented by the ledger"""

    __tablename__ = "inventory_item"
    __table_args__ = (
        CheckConstraint("quantity_on_hand >= 0", name="ck_inventory_quantity_non_negative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, index=True)
    quantity_on_hand = Column(Integer, nullable=False, default=0)
    unit_cost_cents = Column(BigInteger, nullable=False, default=0)
