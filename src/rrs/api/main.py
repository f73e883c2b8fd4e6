from __future__ import annotations

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rrs.api.error_handling import register_exception_handlers
from rrs.api.middleware.access_log import AccessLogMiddleware
from rrs.api.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware
from rrs.api.routes.health import router as health_router
from rrs.api.routes.metrics import router as metrics_router
from rrs.api.routes.reports import router as reports_router
from rrs.api.routes.reservations import router as reservations_router
from rrs.api.routes.tables import router as tables_router
from rrs.api.routes.waitlist import router as waitlist_router
from rrs.infrastructure.observability.logging_config import configure_logging
from rrs.infrastructure.observability.otel import configure_otel

ROUTERS = (
    health_router,
    metrics_router,
    tables_router,
    reservations_router,
    waitlist_router,
    reports_router,
)


def _cors_allow_origins() -> list[str]:
    if os.getenv("APP_ENV", "dev").lower() in {"dev", "test"}:
        return ["*"]
    configured = os.getenv("CORS_ALLOW_ORIGINS", "")
    return [origin.strip() for origin in configured.split(",") if origin.strip()]


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="Restaurant Reservation Service", version="0.1.0")
    register_exception_handlers(app)
    for router in ROUTERS:
        app.include_router(router)

    # Last added runs first: CORS, then request id, then access log.
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_allow_origins(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    configure_otel(app)
    return app


app = create_app()
