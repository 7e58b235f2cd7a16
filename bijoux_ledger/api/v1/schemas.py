"""Pydantic schemas for API request/response validation"""

import uuid
from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from typing import List, Optional


class ORMSchema(BaseModel):
    """Builds from domain dataclasses via attribute access"""

    model_config = ConfigDict(from_attributes=True)


# Requests


class LineItemSchema(ORMSchema):
    """Inventory line taken with a debt"""

    name: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)


class DebtCreateRequest(BaseModel):
    """Request body for POST /v1/debts"""

    customer_name: str = Field(..., description="Customer name")
    amount_cents: int = Field(..., description="Amount owed in cents")
    items_description: str = ""
    phone: Optional[str] = None
    due_date: Optional[date] = None
    line_items: List[LineItemSchema] = Field(default_factory=list)
    paid_now: bool = Field(False, description="Customer paid on the spot")


class PaymentRequest(BaseModel):
    """Request body for POST /v1/debts/{debt_id}/payments"""

    amount_cents: int = Field(..., description="Payment in cents")
    thank_you_message: Optional[str] = None


class CostBasisRequest(BaseModel):
    """Request body for POST /v1/debts/{debt_id}/settle-with-cost"""

    cost_cents: int = Field(..., description="What the sold items cost the shop, in cents")
    thank_you_message: Optional[str] = None


class ContactRequest(BaseModel):
    """Request body for POST /v1/clients"""

    name: str
    phone: Optional[str] = None


class SaleCreateRequest(BaseModel):
    """Request body for POST /v1/sales"""

    item_name: str
    unit_sale_price_cents: int
    quantity: int = 1
    unit_cost_cents: int = 0
    date_sold: Optional[date] = None
    decrement_stock: bool = True


class AmountRequest(BaseModel):
    """Single amount, for capital and daily balance updates"""

    amount_cents: int


# Responses


class DebtSchema(ORMSchema):
    id: uuid.UUID
    customer_name: str
    phone: Optional[str]
    items_description: str
    line_items: List[LineItemSchema]
    amount_owed_cents: int
    original_amount_cents: int
    is_paid: bool
    paid_at: Optional[datetime]
    due_date: Optional[date]
    created_at: datetime


class NotificationSchema(ORMSchema):
    """Message ready for the presentation layer to send"""

    phone: str
    international_phone: str
    message: str


class SecondaryFailureSchema(ORMSchema):
    effect: str
    target: str
    detail: str


class SaleSchema(ORMSchema):
    id: uuid.UUID
    item_name: str
    unit_cost_cents: int
    unit_sale_price_cents: int
    quantity: int
    date_sold: date
    debt_id: Optional[uuid.UUID] = None
    profit_cents: int


class DebtCreatedResponse(ORMSchema):
    """Response for POST /v1/debts"""

    debt: DebtSchema
    notification: Optional[NotificationSchema] = None
    secondary_failures: List[SecondaryFailureSchema] = Field(default_factory=list)


class DebtListResponse(BaseModel):
    """Response for GET /v1/debts"""

    page: int
    debts: List[DebtSchema]


class PaymentResponse(ORMSchema):
    """Response for POST /v1/debts/{debt_id}/payments"""

    debt: DebtSchema
    message: str
    fully_settled: bool
    payment_cents: int
    remaining_cents: int
    secondary_failures: List[SecondaryFailureSchema]


class CostBasisResponse(ORMSchema):
    """Response for POST /v1/debts/{debt_id}/settle-with-cost"""

    debt: DebtSchema
    sale: SaleSchema
    profit_cents: int
    message: str
    secondary_failures: List[SecondaryFailureSchema]


class ClientSchema(BaseModel):
    id: uuid.UUID
    name: str
    phone: Optional[str]
    created_at: datetime


class DeletedResponse(BaseModel):
    deleted: int


class SaleCreatedResponse(ORMSchema):
    """Response for POST /v1/sales"""

    sale: SaleSchema
    secondary_failures: List[SecondaryFailureSchema]


class SalesSummaryResponse(ORMSchema):
    revenue_cents: int
    cost_cents: int
    profit_cents: int
    sale_count: int


class SummaryResponse(ORMSchema):
    """Response for GET /v1/summary"""

    total_unpaid_cents: int
    unpaid_customer_count: int
    total_collected_cents: int
    total_capital_cents: int
    profit_cents: int


class DailyBalanceSchema(BaseModel):
    balance_date: date
    amount_cents: int


class SettingsResponse(BaseModel):
    """Response for /v1/settings endpoints"""

    total_capital_cents: int
    total_collected_cents: int
    profit_cents: int
    daily_balances: List[DailyBalanceSchema]


class ResetResponse(ORMSchema):
    """Response for POST /v1/maintenance/*"""

    scope: str
    prior_capital_cents: int
    prior_collected_cents: int
    sales_deleted: int
    debts_reverted: int
    balances_cleared: int
