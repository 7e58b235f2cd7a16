"""/v1/maintenance - destructive scoped resets"""

import logging
from fastapi import APIRouter, Depends, Request

from bijoux_ledger.api.dependencies import get_maintenance, get_request_id
from bijoux_ledger.api.errors import domain_errors
from bijoux_ledger.api.v1.schemas import ResetResponse
from bijoux_ledger.services.maintenance import MaintenanceService

router = APIRouter()


def _log_request(request: Request, request_id: str, scope: str) -> None:
    logging.warning(
        "Reset requested",
        extra={
            "request_id": request_id,
            "caller_id": getattr(request.state, "caller_id", "unknown"),
            "scope": scope,
        },
    )


@router.post("/maintenance/reset-money", response_model=ResetResponse)
def reset_money(
    request: Request,
    request_id: str = Depends(get_request_id),
    service: MaintenanceService = Depends(get_maintenance),
):
    """Zero capital and collected money; debts and sales are kept"""
    _log_request(request, request_id, "money")
    with domain_errors(request_id):
        report = service.reset_money_only()
    return ResetResponse.model_validate(report)


@router.post("/maintenance/reset-cycle", response_model=ResetResponse)
def reset_cycle(
    request: Request,
    request_id: str = Depends(get_request_id),
    service: MaintenanceService = Depends(get_maintenance),
):
    """Start a new period: delete sales, zero money, reopen paid debts"""
    _log_request(request, request_id, "cycle")
    with domain_errors(request_id):
        report = service.reset_cycle()
    return ResetResponse.model_validate(report)


@router.post("/maintenance/factory-reset", response_model=ResetResponse)
def factory_reset(
    request: Request,
    request_id: str = Depends(get_request_id),
    service: MaintenanceService = Depends(get_maintenance),
):
    """Delete sales, zero money and clear daily balances; customers are kept"""
    _log_request(request, request_id, "factory")
    with domain_errors(request_id):
        report = service.factory_reset()
    return ResetResponse.model_validate(report)
