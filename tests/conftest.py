"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from bijoux_ledger.api.main import create_app
from bijoux_ledger.api.dependencies import get_clock, get_inventory_adjuster
from bijoux_ledger.domain.exceptions import InventoryAdjustmentError
from bijoux_ledger.infrastructure.database.models import Base
from bijoux_ledger.infrastructure.database.session import get_db, init_db
from bijoux_ledger.services.debts import DebtService
from bijoux_ledger.services.maintenance import MaintenanceService
from bijoux_ledger.services.rollup import LedgerRollup
from bijoux_ledger.services.sales import SalesService
from bijoux_ledger.services.settlement import SettlementEngine


class FixedClock:
    """Clock that only moves when told to"""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


class RecordingInventory:
    """Inventory collaborator that remembers decrements and can be told to fail"""

    def __init__(self):
        self.decrements = []
        self.failing_items = set()

    def decrement_stock(self, item_name: str, quantity: int) -> None:
        if item_name in self.failing_items:
            raise InventoryAdjustmentError(f"Not enough stock of {item_name!r}")
        self.decrements.append((item_name, quantity))


@pytest.fixture
def db_engine(tmp_path) -> Generator[Engine, None, None]:
    """Throwaway SQLite database per test"""
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False})
    init_db(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def session_factory(db_engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db(session_factory: sessionmaker) -> Generator[Session, None, None]:
    """Create test database session"""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def inventory() -> RecordingInventory:
    return RecordingInventory()


@pytest.fixture
def settlement(db: Session, inventory: RecordingInventory, clock: FixedClock) -> SettlementEngine:
    return SettlementEngine(db, inventory=inventory, clock=clock, backoff_base=0)


@pytest.fixture
def debt_service(db: Session, inventory: RecordingInventory, clock: FixedClock) -> DebtService:
    return DebtService(db, inventory=inventory, clock=clock)


@pytest.fixture
def sales_service(db: Session, inventory: RecordingInventory, clock: FixedClock) -> SalesService:
    return SalesService(db, inventory=inventory, clock=clock)


@pytest.fixture
def rollup(db: Session, clock: FixedClock) -> LedgerRollup:
    return LedgerRollup(db, clock=clock)


@pytest.fixture
def maintenance(db: Session, clock: FixedClock) -> MaintenanceService:
    return MaintenanceService(db, clock=clock)


@pytest.fixture
def client(db: Session, inventory: RecordingInventory, clock: FixedClock) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_inventory_adjuster] = lambda: inventory
    app.dependency_overrides[get_clock] = lambda: clock
    return TestClient(app, headers={"X-Caller-ID": "mama"})
