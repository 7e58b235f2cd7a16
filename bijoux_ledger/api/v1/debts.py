"""/v1/debts - record debts, take payments, draft reminders"""

import uuid
from fastapi import APIRouter, Depends, Query, Response

from bijoux_ledger.api.dependencies import (
    get_debt_service,
    get_request_id,
    get_settlement_engine,
)
from bijoux_ledger.api.errors import domain_errors
from bijoux_ledger.api.v1.schemas import (
    CostBasisRequest,
    CostBasisResponse,
    DebtCreateRequest,
    DebtCreatedResponse,
    DebtListResponse,
    DebtSchema,
    NotificationSchema,
    PaymentRequest,
    PaymentResponse,
)
from bijoux_ledger.domain.models import LineItem
from bijoux_ledger.services.debts import DebtService
from bijoux_ledger.services.settlement import SettlementEngine

router = APIRouter()


@router.post("/debts", response_model=DebtCreatedResponse, status_code=201)
def create_debt(
    request_body: DebtCreateRequest,
    request_id: str = Depends(get_request_id),
    service: DebtService = Depends(get_debt_service),
):
    """
    Record a customer debt.

    Returns the stored debt and, when a phone number was given, the
    confirmation message for the customer.
    """
    with domain_errors(request_id):
        entry = service.record_debt(
            customer_name=request_body.customer_name,
            amount_cents=request_body.amount_cents,
            items_description=request_body.items_description,
            phone=request_body.phone,
            due_date=request_body.due_date,
            line_items=[LineItem(name=li.name, quantity=li.quantity) for li in request_body.line_items],
            paid_now=request_body.paid_now,
        )
    return DebtCreatedResponse.model_validate(entry)


@router.get("/debts", response_model=DebtListResponse)
def list_unpaid_debts(
    search: str = Query("", description="Match on name, items or phone"),
    page: int = Query(0, ge=0),
    request_id: str = Depends(get_request_id),
    service: DebtService = Depends(get_debt_service),
):
    """Unpaid debts, newest first"""
    with domain_errors(request_id):
        debts = service.list_unpaid(search=search, page=page)
    return DebtListResponse(page=page, debts=[DebtSchema.model_validate(d) for d in debts])


@router.get("/debts/{debt_id}", response_model=DebtSchema)
def get_debt(
    debt_id: uuid.UUID,
    request_id: str = Depends(get_request_id),
    service: DebtService = Depends(get_debt_service),
):
    with domain_errors(request_id):
        debt = service.get_debt(debt_id)
    return DebtSchema.model_validate(debt)


@router.delete("/debts/{debt_id}", status_code=204)
def delete_debt(
    debt_id: uuid.UUID,
    request_id: str = Depends(get_request_id),
    service: DebtService = Depends(get_debt_service),
):
    with domain_errors(request_id):
        service.delete_debt(debt_id)
    return Response(status_code=204)


@router.post("/debts/{debt_id}/payments", response_model=PaymentResponse)
def apply_payment(
    debt_id: uuid.UUID,
    request_body: PaymentRequest,
    request_id: str = Depends(get_request_id),
    engine: SettlementEngine = Depends(get_settlement_engine),
):
    """
    Apply a payment to a debt.

    Flow:
    1. Validate amount (positive)
    2. Conditionally update the balance and add the payment to collected money
    3. Take line items out of stock if the debt is now fully paid
    4. Return the thank-you message (with remaining balance for partial payments)
    """
    with domain_errors(request_id):
        result = engine.apply_payment(debt_id, request_body.amount_cents, request_body.thank_you_message)
    return PaymentResponse.model_validate(result)


@router.post("/debts/{debt_id}/settle-with-cost", response_model=CostBasisResponse)
def settle_with_cost(
    debt_id: uuid.UUID,
    request_body: CostBasisRequest,
    request_id: str = Depends(get_request_id),
    engine: SettlementEngine = Depends(get_settlement_engine),
):
    """Mark a debt fully paid and record it as a sale with the given cost"""
    with domain_errors(request_id):
        result = engine.mark_fully_paid_with_cost_basis(
            debt_id, request_body.cost_cents, request_body.thank_you_message
        )
    return CostBasisResponse.model_validate(result)


@router.get("/debts/{debt_id}/reminder", response_model=NotificationSchema)
def get_reminder(
    debt_id: uuid.UUID,
    request_id: str = Depends(get_request_id),
    service: DebtService = Depends(get_debt_service),
):
    """Reminder text for the outstanding balance"""
    with domain_errors(request_id):
        draft = service.reminder_for(debt_id)
    return NotificationSchema.model_validate(draft)
