"""FastAPI application for the campground quote API.

Provides REST endpoints for:
- Health checks
- Stay quotes and base rate lookups
- Booking-confirmation redemptions
"""

import logging
import os
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mangum import Mangum

from campquote.utils.logging import StructuredFormatter
from campquote_api.exceptions import register_exception_handlers
from campquote_api.middleware.correlation import CorrelationIdMiddleware
from campquote_api.routes import health_router, quotes_router, redemptions_router

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"


def configure_logging(level: int = logging.INFO) -> None:
    """Attach the correlation-aware formatter to the root logger once."""
    root = logging.getLogger()
    if any(isinstance(h.formatter, StructuredFormatter) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter("%(levelname)s %(name)s %(message)s"))
    root.addHandler(handler)
    root.setLevel(level)


configure_logging()

app = FastAPI(
    title="Campground Quote API",
    description="REST API for stay quotes and booking-confirmation redemptions",
    version="0.1.0",
)

cors_origins = os.getenv("CORS_ALLOWED_ORIGINS", DEFAULT_CORS_ORIGINS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in cors_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(CorrelationIdMiddleware)

register_exception_handlers(app)

# All routes live under /api to match the API Gateway path pattern
app.include_router(health_router, prefix="/api")
app.include_router(quotes_router, prefix="/api")
app.include_router(redemptions_router, prefix="/api")


@app.get("/api/ping")
async def ping() -> dict[str, Any]:
    """Liveness check at /api/ping."""
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": "campquote-api",
    }


# API Gateway entry point
handler = Mangum(app, lifespan="off")


def run_server(host: str = "0.0.0.0", port: int = 8080, reload: bool = True) -> None:
    """Serve the quote API locally with uvicorn, reloading on source changes by default."""
    import uvicorn

    if reload:
        # Reload mode needs an import string
        uvicorn.run(
            "campquote_api.main:app",
            host=host,
            port=port,
            reload=True,
            reload_dirs=["backend/api/src", "backend/shared/src"],
        )
    else:
        uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run_server()
