"""API Routers."""

from .channels import router as channels_router
from .publish import router as publish_router
from .scheduler import router as scheduler_router

__all__ = [
    "channels_router",
    "publish_router",
    "scheduler_router",
]
