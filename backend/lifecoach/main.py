"""Main FastAPI application for the life coach backend."""
from fastapi import FastAPI, Request

from lifecoach.api.routes.activities import router as activities_router
from lifecoach.api.routes.coach import router as coach_router
from lifecoach.api.routes.jobs import router as jobs_router
from lifecoach.api.routes.notifications import router as notifications_router
from lifecoach.api.routes.nudges import router as nudges_router
from lifecoach.api.routes.quotes import router as quotes_router
from lifecoach.api.routes.sessions import router as sessions_router
from lifecoach.api.routes.users import router as users_router
from lifecoach.api.routes.weekly_review import router as weekly_review_router
from lifecoach.core.config import settings
from lifecoach.core.logging import configure_logging
from lifecoach.core.middleware import RequestIDMiddleware
from lifecoach.observability.client import init_opik
from lifecoach.observability.tracing import trace

configure_logging(log_level=settings.log_level)

app = FastAPI(title=settings.app_name, version="0.1.0")
app.add_middleware(RequestIDMiddleware)
app.include_router(users_router)
app.include_router(activities_router)
app.include_router(coach_router)
app.include_router(sessions_router)
app.include_router(weekly_review_router)
app.include_router(nudges_router)
app.include_router(jobs_router)
app.include_router(notifications_router)
app.include_router(quotes_router)


@app.on_event("startup")
async def startup_observability() -> None:
    """Initialize observability backends after the event loop starts."""
    init_opik()


@app.get("/health", tags=["health"], summary="Readiness probe")
async def health_check(request: Request) -> dict[str, str]:
    with trace("http.health_check", metadata={"route": "/health"}, request_id=request.state.request_id):
        return {"status": "ok"}
