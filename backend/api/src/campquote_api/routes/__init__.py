"""API routes package.

- health: Health check endpoints
- quotes: Stay quotes and nightly base rates
- redemptions: Booking-confirmation usage recording

All routers are registered in main.py with the /api prefix.
"""

from campquote_api.routes.health import router as health_router
from campquote_api.routes.quotes import router as quotes_router
from campquote_api.routes.redemptions import router as redemptions_router

__all__ = [
    "health_router",
    "quotes_router",
    "redemptions_router",
]
