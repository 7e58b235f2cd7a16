"""FastAPI application factory"""

from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from bijoux_ledger.api.dependencies import get_caller_id
from bijoux_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from bijoux_ledger.api.v1 import clients, debts, finance, maintenance, sales
from bijoux_ledger.infrastructure.database.session import init_db
from bijoux_ledger.infrastructure.observability.logging import setup_logging
from bijoux_ledger.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Bijoux Ledger",
        description="Customer debts, settlements and shop totals for a jewelry retailer",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers; every ledger route needs a caller identity
    authenticated = [Depends(get_caller_id)]
    app.include_router(debts.router, prefix="/v1", tags=["debts"], dependencies=authenticated)
    app.include_router(clients.router, prefix="/v1", tags=["clients"], dependencies=authenticated)
    app.include_router(sales.router, prefix="/v1", tags=["sales"], dependencies=authenticated)
    app.include_router(finance.router, prefix="/v1", tags=["finance"], dependencies=authenticated)
    app.include_router(maintenance.router, prefix="/v1", tags=["maintenance"], dependencies=authenticated)

    return app


app = create_app()
