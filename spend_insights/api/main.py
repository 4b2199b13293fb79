"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from spend_insights.api.middleware import RequestIDMiddleware, MetricsMiddleware
from spend_insights.api.v1 import recurring, coach, forecast
from spend_insights.infrastructure.observability.logging import setup_logging
from spend_insights.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Spend Insights",
        description="Recurring charge detection, budget coaching and expense forecasts",
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

    app.include_router(recurring.router, prefix="/v1", tags=["recurring"])
    app.include_router(coach.router, prefix="/v1", tags=["coach"])
    app.include_router(forecast.router, prefix="/v1", tags=["forecast"])

    return app


app = create_app()
