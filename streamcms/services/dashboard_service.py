"""Dashboard service for the admin overview."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from streamcms.models.category import Category
from streamcms.models.comment import Comment
from streamcms.models.movie import Movie


async def get_dashboard_stats(db: AsyncSession, top_limit: int = 5) -> dict:
    """Totals across movies, categories and comments plus the most viewed movies."""
    movie_row = (
        await db.execute(
            select(
                func.count(Movie.id).label("total"),
                func.count(Movie.id).filter(Movie.is_published.is_(True)).label("published"),
                func.count(Movie.id).filter(Movie.featured.is_(True)).label("featured"),
                func.coalesce(func.sum(Movie.view_count), 0).label("views"),
            )
        )
    ).one()

    comment_row = (
        await db.execute(
            select(
                func.count(Comment.id).label("total"),
                func.count(Comment.id).filter(Comment.is_approved.is_(False)).label("pending"),
            )
        )
    ).one()

    total_categories = (await db.execute(select(func.count(Category.id)))).scalar() or 0

    top_result = await db.execute(
        select(Movie.id, Movie.title, Movie.slug, Movie.view_count)
        .order_by(Movie.view_count.desc(), Movie.id.asc())
        .limit(top_limit)
    )

    return {
        "total_movies": movie_row.total or 0,
        "published_movies": movie_row.published or 0,
        "featured_movies": movie_row.featured or 0,
        "total_categories": total_categories,
        "total_comments": comment_row.total or 0,
        "pending_comments": comment_row.pending or 0,
        "total_views": movie_row.views or 0,
        "top_movies": [dict(row._mapping) for row in top_result.all()],
    }
