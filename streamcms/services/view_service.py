"""
View Count Service

The only writer of ``movies.view_count``. The increment is a single
UPDATE ... RETURNING statement so concurrent callers never lose an update.
"""

import logging

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from streamcms.exceptions import DatabaseError, MovieNotFoundError
from streamcms.models.movie import Movie

logger = logging.getLogger(__name__)


async def increment_view_count(db: AsyncSession, slug: str) -> int:
    """
    Add one view to a published movie and return the new count.

    Not idempotent: every accepted call counts. Unknown or unpublished
    slugs raise MovieNotFoundError and leave the table untouched.
    """
    stmt = (
        update(Movie)
        .where(Movie.slug == slug, Movie.is_published.is_(True))
        # updated_at stays as is; a view is not an edit
        .values(view_count=Movie.view_count + 1, updated_at=Movie.updated_at)
        .returning(Movie.view_count)
        .execution_options(synchronize_session=False)
    )

    try:
        result = await db.execute(stmt)
        new_count = result.scalar_one_or_none()
        if new_count is None:
            await db.rollback()
            raise MovieNotFoundError(slug)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to increment view count for '{slug}': {e}")
        raise DatabaseError("Failed to increment view count", operation="increment_view_count") from e

    logger.debug(f"View counted: slug={slug}, view_count={new_count}")
    return new_count
