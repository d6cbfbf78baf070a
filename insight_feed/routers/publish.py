"""
Publish API Router

Fetch-only refresh and the full fetch → commit → push workflow.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse

from ..core.logging import get_logger
from ..core.rate_limit import WRITE_LIMIT, limiter
from ..models.publish import PublishResult
from ..models.response import DaysRequest, FetchSummary
from ..services.publisher import Publisher, get_publisher
from ..services.youtube_api import get_catalog_client

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["publish"])


@router.post("/fetch", response_model=FetchSummary)
@limiter.limit(WRITE_LIMIT)
async def fetch_videos(
    request: Request,
    payload: Optional[DaysRequest] = Body(None),
    publisher: Publisher = Depends(get_publisher),
):
    """
    Refresh videos.json without committing.

    Returns 502 when every channel failed (the previous feed is kept) and
    409 while a publish is running.
    """
    days = payload.days if payload else None
    logger.info("fetch_requested", days=days)

    summary = await publisher.refresh(days)
    if not summary.success:
        return JSONResponse(status_code=502, content=summary.model_dump(mode="json", by_alias=True))
    return summary


@router.post("/deploy", response_model=PublishResult)
@limiter.limit(WRITE_LIMIT)
async def deploy(
    request: Request,
    payload: Optional[DaysRequest] = Body(None),
    publisher: Publisher = Depends(get_publisher),
):
    """
    Fetch, then commit and push the data files when they changed.

    "No changes" outcomes are successes. Failures return 500 with the
    step log attached so partial progress is visible.
    """
    days = payload.days if payload else None
    logger.info("deploy_requested", days=days)

    result = await publisher.publish(days)
    if not result.success:
        return JSONResponse(status_code=500, content=result.model_dump(mode="json", by_alias=True))
    return result


@router.get("/quota")
async def quota_status():
    """Today's YouTube quota usage as tracked by this process."""
    return get_catalog_client().quota_manager.get_status()
