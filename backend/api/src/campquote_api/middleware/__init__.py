"""HTTP middleware."""

from campquote_api.middleware.correlation import CorrelationIdMiddleware

__all__ = ["CorrelationIdMiddleware"]
