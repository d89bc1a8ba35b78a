"""
Comment Routes

Public comment thread plus moderation endpoints.  Signed-in authors are
approved immediately; guest comments wait for a moderator.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from streamcms.auth import get_optional_user, require_admin
from streamcms.constants import DEFAULT_COMMENTS_PER_PAGE, MAX_PAGE_SIZE
from streamcms.database import get_db
from streamcms.exceptions import CommentNotFoundError
from streamcms.models.user import User
from streamcms.schemas.comment import CommentCreate, CommentListResponse, CommentResponse, CommentUpdate
from streamcms.schemas.movie import Pagination
from streamcms.services.comment_service import CommentService
from streamcms.services.movie_service import page_count
from streamcms.utils.client_ip import get_client_ip

router = APIRouter(tags=["Comments"])


@router.get("", response_model=CommentListResponse)
async def list_comments(
    movie_id: Optional[int] = None,
    approved: Optional[bool] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_COMMENTS_PER_PAGE, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
) -> CommentListResponse:
    """
    List comments newest first.

    Only moderators can see comments awaiting approval.
    """
    if user is None or not user.is_admin:
        approved = True

    comments, total = await CommentService(db).list_comments(
        movie_id=movie_id, approved=approved, page=page, limit=limit
    )
    return CommentListResponse(
        comments=[CommentResponse.model_validate(c) for c in comments],
        pagination=Pagination(page=page, limit=limit, total=total, pages=page_count(total, limit)),
    )


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    data: CommentCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    return await CommentService(db).create_comment(data, user=user, ip_address=get_client_ip(request))


@router.get("/{comment_id}", response_model=CommentResponse)
async def get_comment(
    comment_id: int,
    db: AsyncSession = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    comment = await CommentService(db).get_comment(comment_id)
    # Pending comments stay hidden from everyone but moderators
    if not comment.is_approved and (user is None or not user.is_admin):
        raise CommentNotFoundError(comment_id)
    return comment


@router.put("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: int,
    data: CommentUpdate,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    return await CommentService(db).update_comment(comment_id, data)


@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: int,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    await CommentService(db).delete_comment(comment_id)
    return {"success": True}
