"""
Movie Service

CRUD and catalog queries for movies. View counting lives in view_service.
"""

import logging
import math
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from streamcms.exceptions import DuplicateResourceError, MovieNotFoundError, ValidationError
from streamcms.models.category import Category
from streamcms.models.movie import Movie
from streamcms.schemas.movie import MovieCreate, MovieUpdate
from streamcms.utils.slugify import resolve_slug

logger = logging.getLogger(__name__)

NON_NULLABLE_FIELDS = {"title", "video_url", "is_published", "featured"}


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


class MovieService:
    """Service for managing movies."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_movies(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        published: Optional[bool] = None,
        featured: Optional[bool] = None,
        page: int = 1,
        limit: int = 12,
    ) -> tuple[list[Movie], int]:
        """
        List movies newest first.

        Args:
            search: Case-insensitive match on title or synopsis
            category: Category slug the movie must belong to
            published: Filter on publication state when not None
            featured: Filter on the featured flag when not None
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple of (movies on this page, total matching movies)
        """
        query = select(Movie)

        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(or_(Movie.title.ilike(pattern), Movie.synopsis.ilike(pattern)))

        if published is not None:
            query = query.where(Movie.is_published.is_(published))

        if featured is not None:
            query = query.where(Movie.featured.is_(featured))

        if category:
            query = query.where(Movie.categories.any(Category.slug == category))

        total_result = await self.db.execute(select(func.count()).select_from(query.subquery()))
        total = total_result.scalar() or 0

        query = query.order_by(Movie.created_at.desc(), Movie.id.desc()).offset((page - 1) * limit).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all()), total

    async def get_movie(self, slug: str, published_only: bool = False) -> Movie:
        query = select(Movie).where(Movie.slug == slug)
        if published_only:
            query = query.where(Movie.is_published.is_(True))
        result = await self.db.execute(query)
        movie = result.scalar_one_or_none()
        if movie is None:
            raise MovieNotFoundError(slug)
        return movie

    async def _slug_taken(self, slug: str) -> bool:
        result = await self.db.execute(select(Movie.id).where(Movie.slug == slug))
        return result.first() is not None

    async def _load_categories(self, category_ids: list[int]) -> list[Category]:
        if not category_ids:
            return []
        wanted = set(category_ids)
        result = await self.db.execute(select(Category).where(Category.id.in_(wanted)))
        categories = list(result.scalars().all())
        missing = wanted - {c.id for c in categories}
        if missing:
            raise ValidationError(
                "Unknown category ids", field="category_ids", details={"missing": sorted(missing)}
            )
        return categories

    async def create_movie(self, data: MovieCreate) -> Movie:
        try:
            slug = resolve_slug(data.slug, data.title)
        except ValueError:
            raise ValidationError("Could not derive a slug from the title", field="slug")

        if await self._slug_taken(slug):
            raise DuplicateResourceError("Movie", "slug", slug)

        movie = Movie(
            **data.model_dump(exclude={"slug", "category_ids"}),
            slug=slug,
            categories=await self._load_categories(data.category_ids),
        )
        self.db.add(movie)
        await self.db.commit()
        await self.db.refresh(movie)

        logger.info(f"Movie created: id={movie.id}, slug={movie.slug}")
        return movie

    async def update_movie(self, slug: str, data: MovieUpdate) -> Movie:
        movie = await self.get_movie(slug)
        changes = data.model_dump(exclude_unset=True, exclude={"new_slug", "category_ids"})

        if data.new_slug and data.new_slug != slug:
            try:
                new_slug = resolve_slug(data.new_slug, data.new_slug)
            except ValueError:
                raise ValidationError("Could not derive a slug", field="new_slug")
            if new_slug != slug and await self._slug_taken(new_slug):
                raise DuplicateResourceError("Movie", "slug", new_slug)
            # Clients key their view markers on the slug, so renaming resets them
            movie.slug = new_slug

        for field, value in changes.items():
            if value is None and field in NON_NULLABLE_FIELDS:
                continue
            setattr(movie, field, value)

        if data.category_ids is not None:
            movie.categories = await self._load_categories(data.category_ids)

        await self.db.commit()
        await self.db.refresh(movie)

        logger.info(f"Movie updated: id={movie.id}, fields={sorted(data.model_fields_set)}")
        return movie

    async def delete_movie(self, slug: str) -> None:
        movie = await self.get_movie(slug)
        await self.db.delete(movie)
        await self.db.commit()
        logger.info(f"Movie deleted: slug={slug}")
