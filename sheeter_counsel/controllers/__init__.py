"""FastAPI routers acting as controllers."""

from . import flows

__all__ = ["flows"]
