"""FastAPI application serving the hotel reservation web pages.

Pages are rendered server-side from Jinja2 templates; all data comes from the
hotel REST backend at API_URL. The app provides:
- Public pages (home, rooms, login/register, payment links)
- Guest pages (booking, reservations, cancellation, profile, payments)
- Admin console (dashboard, users, rooms, reservations, assisted booking,
  transactions)
"""

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from mangum import Mangum

from hotel_shared.config import BUILD_VERSION, get_settings
from hotel_shared.services.api_client import close_api_client
from hotel_shared.utils.logging import configure_logging
from hotel_web.exceptions import register_exception_handlers
from hotel_web.middleware import CorrelationIdMiddleware, SessionCookieMiddleware
from hotel_web.routes import (
    admin_router,
    auth_router,
    booking_router,
    home_router,
    payments_router,
    profile_router,
    reservations_router,
    rooms_router,
)

logger = logging.getLogger(__name__)
configure_logging()

STATIC_DIR = Path(__file__).parent / "static"


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    logger.info("Starting hotel web against %s", get_settings().api_url)
    yield
    await close_api_client()


app = FastAPI(
    title="Hotel Reservation Web",
    description="Server-rendered guest and admin pages for the hotel reservation platform",
    version=BUILD_VERSION,
    lifespan=lifespan,
)

# Middleware added last runs first: correlation id wraps the session lookup
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(SessionCookieMiddleware)
app.add_middleware(CorrelationIdMiddleware)

register_exception_handlers(app)

app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

app.include_router(home_router)
app.include_router(auth_router)
app.include_router(rooms_router)
app.include_router(booking_router)
app.include_router(reservations_router)
app.include_router(profile_router)
app.include_router(payments_router)
app.include_router(admin_router)


@app.get("/ping")
async def ping() -> dict[str, Any]:
    """Health check endpoint."""
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": "hotel-web",
    }


# Lambda handler - Mangum wraps FastAPI for AWS Lambda + API Gateway
handler = Mangum(app, lifespan="off")


def run_server(host: str = "0.0.0.0", port: int = 8000, reload: bool = True) -> None:
    """Run the web server.

    Args:
        host: Host to bind to (default: 0.0.0.0)
        port: Port to listen on (default: 8000)
        reload: Enable hot reload for development (default: True)
    """
    import uvicorn

    if reload:
        # Use string reference for reload mode (uvicorn requirement)
        uvicorn.run("hotel_web.main:app", host=host, port=port, reload=True, reload_dirs=["src"])
    else:
        uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
