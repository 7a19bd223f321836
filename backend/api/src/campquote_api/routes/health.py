"""Health check endpoint."""

import os
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter

import campquote

router = APIRouter(tags=["health"])


@router.get("/health", summary="Service health")
async def health() -> dict[str, Any]:
    return {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "version": campquote.__version__,
        "environment": os.getenv("ENVIRONMENT", "dev"),
    }
