"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.middleware.sessions import SessionMiddleware
from starlette.responses import Response

from bill_tracker.api.middleware import RequestIDMiddleware, MetricsMiddleware
from bill_tracker.api.v1 import auth, dashboard, profile, records
from bill_tracker.domain.models import RecordKind
from bill_tracker.infrastructure.observability.logging import setup_logging
from bill_tracker.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Bill Tracker",
        description="Personal income, expense and credit-card tracker",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=settings.session_cookie,
        max_age=settings.session_max_age_seconds,
        same_site="lax",
        https_only=settings.session_https_only,
    )
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(auth.router, prefix="/v1", tags=["auth"])
    app.include_router(profile.router, prefix="/v1", tags=["profile"])
    app.include_router(records.build_router(RecordKind.INCOME), prefix="/v1/incomes", tags=["incomes"])
    app.include_router(records.build_router(RecordKind.EXPENSE), prefix="/v1/expenses", tags=["expenses"])
    app.include_router(
        records.build_router(RecordKind.CREDIT_CARD), prefix="/v1/credit-card", tags=["credit-card"]
    )
    app.include_router(dashboard.router, prefix="/v1", tags=["dashboard"])

    return app


app = create_app()
