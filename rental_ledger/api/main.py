"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from rental_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from rental_ledger.api.v1 import rentals, customers, reports
from rental_ledger.domain.reconciliation import configure_cache
from rental_ledger.infrastructure.observability.logging import setup_logging
from rental_ledger.config import settings

# Setup structured logging
setup_logging(settings.log_level)
configure_cache(settings.evaluation_cache_size)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Rental Ledger",
        description="Rental balance reconciliation, revenue attribution and customer risk reports",
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

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(rentals.router, prefix="/v1", tags=["rentals"])
    app.include_router(customers.router, prefix="/v1", tags=["customers"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])

    return app


app = create_app()
