"""Application middleware package."""

from .logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
