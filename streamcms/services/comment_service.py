"""
Comment Service

Provides CRUD operations for movie comments with moderation support.
"""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from streamcms.exceptions import CommentNotFoundError, MovieNotFoundError, ValidationError
from streamcms.models.comment import Comment
from streamcms.models.movie import Movie
from streamcms.models.user import User
from streamcms.schemas.comment import CommentCreate, CommentUpdate

logger = logging.getLogger(__name__)


class CommentService:
    """Service for managing comments."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_comment(
        self,
        data: CommentCreate,
        user: Optional[User] = None,
        ip_address: Optional[str] = None,
    ) -> Comment:
        """
        Create a new comment.

        Comments from signed-in users are approved immediately; guest
        comments need an author name and wait for moderation.

        Args:
            data: Validated comment payload
            user: The signed-in author, or None for a guest
            ip_address: Caller IP kept for moderation

        Returns:
            Created comment instance
        """
        if user is None and not data.author_name:
            raise ValidationError("Author name is required for guest comments", field="author_name")

        movie = await self.db.get(Movie, data.movie_id)
        if not movie:
            raise MovieNotFoundError(movie_id=data.movie_id)

        comment = Comment(
            movie_id=movie.id,
            user_id=user.id if user else None,
            author_name=data.author_name,
            author_email=str(data.author_email) if data.author_email else None,
            text=data.text,
            ip_address=ip_address,
            is_approved=user is not None,
        )

        self.db.add(comment)
        await self.db.commit()
        await self.db.refresh(comment)

        logger.info(
            f"Comment created: id={comment.id}, movie={movie.id}, user={comment.user_id}, approved={comment.is_approved}"
        )
        return comment

    async def get_comment(self, comment_id: int) -> Comment:
        comment = await self.db.get(Comment, comment_id)
        if not comment:
            raise CommentNotFoundError(comment_id)
        return comment

    async def list_comments(
        self,
        movie_id: Optional[int] = None,
        approved: Optional[bool] = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Comment], int]:
        """Newest comments first, optionally limited to one movie and/or one approval state."""
        query = select(Comment)

        if movie_id is not None:
            query = query.where(Comment.movie_id == movie_id)

        if approved is not None:
            query = query.where(Comment.is_approved.is_(approved))

        total_result = await self.db.execute(select(func.count()).select_from(query.subquery()))
        total = total_result.scalar() or 0

        query = query.order_by(Comment.created_at.desc(), Comment.id.desc()).offset((page - 1) * limit).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all()), total

    async def update_comment(self, comment_id: int, data: CommentUpdate) -> Comment:
        comment = await self.get_comment(comment_id)

        if data.is_approved is not None:
            comment.is_approved = data.is_approved
        if data.text is not None:
            comment.text = data.text

        await self.db.commit()
        await self.db.refresh(comment)

        logger.info(f"Comment updated: id={comment_id}, approved={comment.is_approved}")
        return comment

    async def delete_comment(self, comment_id: int) -> None:
        comment = await self.get_comment(comment_id)
        await self.db.delete(comment)
        await self.db.commit()
        logger.info(f"Comment deleted: id={comment_id}")
