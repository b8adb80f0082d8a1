"""Main FastAPI application for the BrightLight backend."""
from fastapi import FastAPI, Request

from brightlight.api.deps import build_services
from brightlight.api.routes.chat import router as chat_router
from brightlight.api.routes.checkin import router as checkin_router
from brightlight.api.routes.emotions import router as emotions_router
from brightlight.api.routes.plan import router as plan_router
from brightlight.api.routes.preferences import router as preferences_router
from brightlight.core.config import settings
from brightlight.core.logging import configure_logging
from brightlight.core.middleware import RequestIDMiddleware
from brightlight.db.session import init_db
from brightlight.observability.client import init_opik
from brightlight.observability.tracing import trace

configure_logging(log_level=settings.log_level)

app = FastAPI(title=settings.app_name, version="0.1.0")
app.add_middleware(RequestIDMiddleware)
app.include_router(checkin_router)
app.include_router(plan_router)
app.include_router(preferences_router)
app.include_router(emotions_router)
app.include_router(chat_router)

app.state.services = build_services(settings)


@app.on_event("startup")
async def startup() -> None:
    """Initialize observability and create missing tables after the event loop starts."""
    init_opik()
    init_db()


@app.on_event("shutdown")
async def shutdown() -> None:
    app.state.services.emotion_classifier.close()


@app.get("/health", tags=["health"], summary="Readiness check")
async def health_check(request: Request) -> dict[str, str]:
    """Return a simple status payload for readiness checks."""
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}
