from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from octopoz.api.error_handling import register_exception_handlers
from octopoz.api.middleware.access_log import AccessLogMiddleware
from octopoz.api.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware
from octopoz.api.routes.health import router as health_router
from octopoz.api.routes.metrics import router as metrics_router
from octopoz.api.routes.orders import router as orders_router
from octopoz.api.routes.promotions import router as promotions_router
from octopoz.api.routes.reservations import router as reservations_router
from octopoz.infrastructure.config import app_env, cors_allow_origins
from octopoz.infrastructure.observability.logging_config import configure_logging
from octopoz.infrastructure.observability.otel import configure_otel

ENGINE_ROUTERS = (orders_router, reservations_router, promotions_router)


def _allowed_origins() -> list[str]:
    if app_env() in {"dev", "test"}:
        return ["*"]
    return cors_allow_origins()


def create_app() -> FastAPI:
    """Build the HTTP adapter around the engine use cases.

    Stores are resolved per request through ``octopoz.api.dependencies`` so tests
    can swap them with ``app.dependency_overrides``.
    """
    configure_logging()

    app = FastAPI(title="Octopoz Order Engine", version="0.1.0")
    register_exception_handlers(app)
    app.include_router(health_router)
    app.include_router(metrics_router)
    for router in ENGINE_ROUTERS:
        app.include_router(router)

    # Starlette runs the last added middleware first.
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_allowed_origins(),
        allow_credentials=False,
        allow_methods=["GET", "POST", "PATCH"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    configure_otel(app)
    return app


app = create_app()
