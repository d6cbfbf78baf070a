"""
Channels API Router

Endpoints for managing the subscribed channel registry.
"""

from typing import List

from fastapi import APIRouter, Depends, Request, status

from ..core.logging import get_logger
from ..core.rate_limit import WRITE_LIMIT, limiter
from ..models.channel import Channel, ChannelCreateRequest
from ..models.response import ErrorResponse, MessageResponse
from ..services.channel_service import ChannelService, get_channel_service

logger = get_logger(__name__)

router = APIRouter(prefix="/api/channels", tags=["channels"])


@router.get("", response_model=List[Channel])
async def list_channels(service: ChannelService = Depends(get_channel_service)):
    """List subscribed channels in insertion order."""
    return service.list_channels()


@router.post(
    "",
    response_model=Channel,
    status_code=status.HTTP_201_CREATED,
    responses={code: {"model": ErrorResponse} for code in (400, 404, 409, 429, 503)},
)
@limiter.limit(WRITE_LIMIT)
async def add_channel(
    request: Request,
    payload: ChannelCreateRequest,
    service: ChannelService = Depends(get_channel_service),
):
    """
    Subscribe to a channel by URL or @handle.

    Returns 400 for malformed input, 404 when the handle does not exist,
    409 when already subscribed and 429 on provider quota rejection.
    """
    return await service.add_channel(payload.url)


@router.delete("/{channel_id}", response_model=MessageResponse, responses={404: {"model": ErrorResponse}})
async def remove_channel(
    channel_id: str,
    service: ChannelService = Depends(get_channel_service),
):
    """Unsubscribe a channel by its ID."""
    service.remove_channel(channel_id)
    return MessageResponse(success=True, message=f"Channel removed: {channel_id}")
