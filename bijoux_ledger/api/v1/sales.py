"""/v1/sales - point-of-sale entries and sales totals"""

from typing import List
from fastapi import APIRouter, Depends, Query

from bijoux_ledger.api.dependencies import get_request_id, get_rollup, get_sales_service
from bijoux_ledger.api.errors import domain_errors
from bijoux_ledger.api.v1.schemas import (
    SaleCreateRequest,
    SaleCreatedResponse,
    SaleSchema,
    SalesSummaryResponse,
)
from bijoux_ledger.services.rollup import LedgerRollup
from bijoux_ledger.services.sales import SalesService

router = APIRouter()


@router.post("/sales", response_model=SaleCreatedResponse, status_code=201)
def record_sale(
    request_body: SaleCreateRequest,
    request_id: str = Depends(get_request_id),
    service: SalesService = Depends(get_sales_service),
):
    with domain_errors(request_id):
        entry = service.record_sale(
            item_name=request_body.item_name,
            unit_sale_price_cents=request_body.unit_sale_price_cents,
            quantity=request_body.quantity,
            unit_cost_cents=request_body.unit_cost_cents,
            date_sold=request_body.date_sold,
            decrement_stock=request_body.decrement_stock,
        )
    return SaleCreatedResponse.model_validate(entry)


@router.get("/sales", response_model=List[SaleSchema])
def list_sales(
    limit: int = Query(100, ge=1, le=500),
    request_id: str = Depends(get_request_id),
    service: SalesService = Depends(get_sales_service),
):
    with domain_errors(request_id):
        sales = service.list_sales(limit)
    return [SaleSchema.model_validate(s) for s in sales]


@router.get("/sales/summary", response_model=SalesSummaryResponse)
def sales_summary(
    request_id: str = Depends(get_request_id),
    rollup: LedgerRollup = Depends(get_rollup),
):
    """Revenue, cost and profit over all recorded sales"""
    with domain_errors(request_id):
        summary = rollup.sales_summary()
    return SalesSummaryResponse.model_validate(summary)
