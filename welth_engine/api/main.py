"""Welth analytics engine HTTP app"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from welth_engine.api.middleware import RequestIDMiddleware, MetricsMiddleware
from welth_engine.api.v1 import advisor, guardian, time_machine, twin
from welth_engine.infrastructure.observability.logging import setup_logging
from welth_engine.config import settings

setup_logging(settings.log_level)

V1_ROUTERS = (
    (advisor.router, "advisor"),
    (time_machine.router, "time-machine"),
    (twin.router, "twin"),
    (guardian.router, "guardian"),
)


def create_app() -> FastAPI:
    """Wire the advisor, time machine, twin and guardian routers behind request-id and metrics middleware"""
    app = FastAPI(
        title="Welth Analytics Engine",
        description="Balance history, cash-flow forecasts, what-if timelines, purchase advice and budget guardian",
        version="0.1.0",
    )

    # RequestIDMiddleware runs first so metrics and handlers see the id
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    for router, tag in V1_ROUTERS:
        app.include_router(router, prefix="/v1", tags=[tag])

    return app


app = create_app()
