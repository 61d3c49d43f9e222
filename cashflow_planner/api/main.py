"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from cashflow_planner.api.middleware import RequestIDMiddleware, MetricsMiddleware
from cashflow_planner.api.v1 import accounts, events, cashflow, spending_limit, planning, dashboard
from cashflow_planner.infrastructure.observability.logging import setup_logging
from cashflow_planner.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Cashflow Planner",
        description="Cashflow projection and daily spending limit service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(accounts.router, prefix="/v1", tags=["accounts"])
    app.include_router(events.router, prefix="/v1", tags=["events"])
    app.include_router(cashflow.router, prefix="/v1", tags=["cashflow"])
    app.include_router(spending_limit.router, prefix="/v1", tags=["spending-limit"])
    app.include_router(planning.router, prefix="/v1", tags=["planning"])
    app.include_router(dashboard.router, prefix="/v1", tags=["dashboard"])

    return app


app = create_app()
