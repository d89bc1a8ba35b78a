"""
View Count Routes

The increment endpoint called by view trackers.  It is the only endpoint
meant to be reachable cross-origin, so it sets its own CORS headers.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from streamcms.database import get_db
from streamcms.schemas.movie import ViewCountResponse
from streamcms.services.view_service import increment_view_count

router = APIRouter(tags=["Views"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST",
    "Access-Control-Allow-Headers": "Content-Type",
}


@router.post("/content/{slug}/views", response_model=ViewCountResponse)
@router.post("/api/movies/{slug}/views", response_model=ViewCountResponse)
async def increment_views(slug: str, response: Response, db: AsyncSession = Depends(get_db)) -> ViewCountResponse:
    """
    Add one view to a published movie and return the new total.

    Every call counts; callers are expected to de-duplicate.
    """
    view_count = await increment_view_count(db, slug)
    response.headers.update(CORS_HEADERS)
    return ViewCountResponse(view_count=view_count)


@router.options("/content/{slug}/views")
@router.options("/api/movies/{slug}/views")
async def views_preflight(slug: str) -> Response:
    return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)
