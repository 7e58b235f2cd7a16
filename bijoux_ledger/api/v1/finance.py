"""/v1/summary and /v1/settings - ledger totals and operator-entered figures"""

from datetime import date
from typing import List
from fastapi import APIRouter, Depends

from bijoux_ledger.api.dependencies import get_request_id, get_rollup
from bijoux_ledger.api.errors import domain_errors
from bijoux_ledger.api.v1.schemas import (
    AmountRequest,
    DailyBalanceSchema,
    SettingsResponse,
    SummaryResponse,
)
from bijoux_ledger.domain.models import FinancialSettings
from bijoux_ledger.services.rollup import LedgerRollup

router = APIRouter()


def _settings_response(fin: FinancialSettings) -> SettingsResponse:
    return SettingsResponse(
        total_capital_cents=fin.total_capital_cents,
        total_collected_cents=fin.total_collected_cents,
        profit_cents=fin.profit_cents,
        daily_balances=[
            DailyBalanceSchema(balance_date=d, amount_cents=amount)
            for d, amount in sorted(fin.daily_balances.items())
        ],
    )


@router.get("/summary", response_model=SummaryResponse)
def get_summary(
    request_id: str = Depends(get_request_id),
    rollup: LedgerRollup = Depends(get_rollup),
):
    """Total unpaid, unpaid customers, collected money, capital and profit"""
    with domain_errors(request_id):
        summary = rollup.compute_summary()
    return SummaryResponse.model_validate(summary)


@router.get("/settings", response_model=SettingsResponse)
def get_settings(
    request_id: str = Depends(get_request_id),
    rollup: LedgerRollup = Depends(get_rollup),
):
    with domain_errors(request_id):
        fin = rollup.get_settings()
    return _settings_response(fin)


@router.put("/settings/capital", response_model=SettingsResponse)
def set_capital(
    request_body: AmountRequest,
    request_id: str = Depends(get_request_id),
    rollup: LedgerRollup = Depends(get_rollup),
):
    """Declare total capital invested in stock"""
    with domain_errors(request_id):
        fin = rollup.set_capital(request_body.amount_cents)
    return _settings_response(fin)


@router.post("/settings/capital/add", response_model=SettingsResponse)
def add_capital(
    request_body: AmountRequest,
    request_id: str = Depends(get_request_id),
    rollup: LedgerRollup = Depends(get_rollup),
):
    with domain_errors(request_id):
        fin = rollup.add_capital(request_body.amount_cents)
    return _settings_response(fin)


@router.get("/settings/balances", response_model=List[DailyBalanceSchema])
def list_balances(
    request_id: str = Depends(get_request_id),
    rollup: LedgerRollup = Depends(get_rollup),
):
    """End-of-day cash counts, oldest first"""
    with domain_errors(request_id):
        balances = rollup.list_daily_balances()
    return [DailyBalanceSchema(balance_date=d, amount_cents=amount) for d, amount in balances.items()]


@router.put("/settings/balances/{balance_date}", response_model=SettingsResponse)
def set_daily_balance(
    balance_date: date,
    request_body: AmountRequest,
    request_id: str = Depends(get_request_id),
    rollup: LedgerRollup = Depends(get_rollup),
):
    """Record the end-of-day cash count for a date"""
    with domain_errors(request_id):
        fin = rollup.set_daily_balance(balance_date, request_body.amount_cents)
    return _settings_response(fin)
