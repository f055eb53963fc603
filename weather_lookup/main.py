"""FastAPI application setup for the city weather lookup service."""

from datetime import datetime, timezone

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from .api import router as api_router
from .config import settings

SERVICE_NAME = "City Weather Lookup"

app = FastAPI(title=SERVICE_NAME)

# Search history lives in a signed session cookie.
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret_key,
    session_cookie="weather_session",
    same_site="lax",
)


@app.get("/health")
def health():
    """Liveness probe."""
    return {
        "status": "UP",
        "service": SERVICE_NAME,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# API routes
app.include_router(api_router, prefix="/v1")
