"""Dependency injection for FastAPI endpoints"""

from typing import Optional
from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session
from bijoux_ledger.config import settings
from bijoux_ledger.domain.inventory import InventoryAdjuster, NullInventoryAdjuster
from bijoux_ledger.infrastructure.clients.inventory import InventoryClient
from bijoux_ledger.infrastructure.database.inventory import SqlInventoryAdjuster
from bijoux_ledger.infrastructure.database.session import SessionLocal, get_db
from bijoux_ledger.services.debts import DebtService
from bijoux_ledger.services.maintenance import MaintenanceService
from bijoux_ledger.services.rollup import LedgerRollup
from bijoux_ledger.services.sales import SalesService
from bijoux_ledger.services.settlement import SettlementEngine
from bijoux_ledger.utils.date_utils import Clock, utc_now


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_caller_id(request: Request, x_caller_id: Optional[str] = Header(default=None)) -> str:
    """Identity supplied by the upstream session provider; trusted as-is"""
    if not x_caller_id or not x_caller_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-Caller-ID header")
    request.state.caller_id = x_caller_id.strip()
    return request.state.caller_id


def get_clock() -> Clock:
    return utc_now


def get_inventory_adjuster() -> InventoryAdjuster:
    """Provide the configured inventory collaborator"""
    if settings.inventory_backend == "http":
        return InventoryClient()
    if settings.inventory_backend == "sql":
        return SqlInventoryAdjuster(SessionLocal)
    return NullInventoryAdjuster()


def get_settlement_engine(
    db: Session = Depends(get_db),
    inventory: InventoryAdjuster = Depends(get_inventory_adjuster),
    clock: Clock = Depends(get_clock),
) -> SettlementEngine:
    return SettlementEngine(db, inventory=inventory, clock=clock)


def get_debt_service(
    db: Session = Depends(get_db),
    inventory: InventoryAdjuster = Depends(get_inventory_adjuster),
    clock: Clock = Depends(get_clock),
) -> DebtService:
    return DebtService(db, inventory=inventory, clock=clock)


def get_sales_service(
    db: Session = Depends(get_db),
    inventory: InventoryAdjuster = Depends(get_inventory_adjuster),
    clock: Clock = Depends(get_clock),
) -> SalesService:
    return SalesService(db, inventory=inventory, clock=clock)


def get_rollup(db: Session = Depends(get_db), clock: Clock = Depends(get_clock)) -> LedgerRollup:
    return LedgerRollup(db, clock=clock)


def get_maintenance(db: Session = Depends(get_db), clock: Clock = Depends(get_clock)) -> MaintenanceService:
    return MaintenanceService(db, clock=clock)
