"""
Category Service

Category CRUD plus the per-category statistics shown on the admin dashboard.
"""

import logging
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from streamcms.exceptions import (
    CategoryNotFoundError,
    DuplicateResourceError,
    ResourceInUseError,
    ValidationError,
)
from streamcms.models.category import Category
from streamcms.models.movie import Movie
from streamcms.models.movie_categories import movie_categories
from streamcms.schemas.category import CategoryCreate, CategoryUpdate
from streamcms.utils.slugify import resolve_slug

logger = logging.getLogger(__name__)


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _movie_count(self, category_id: int) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(movie_categories).where(movie_categories.c.category_id == category_id)
        )
        return result.scalar() or 0

    async def _slug_taken(self, slug: str) -> bool:
        result = await self.db.execute(select(Category.id).where(Category.slug == slug))
        return result.first() is not None

    async def list_categories(self, search: Optional[str] = None) -> list[Category]:
        """Categories ordered by name, each with a ``movie_count`` attribute attached."""
        movie_count = func.count(movie_categories.c.movie_id).label("movie_count")
        query = (
            select(Category, movie_count)
            .outerjoin(movie_categories, movie_categories.c.category_id == Category.id)
            .group_by(Category.id)
            .order_by(Category.name.asc())
        )

        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(or_(Category.name.ilike(pattern), Category.description.ilike(pattern)))

        result = await self.db.execute(query)
        categories = []
        for category, count in result.all():
            category.movie_count = count
            categories.append(category)
        return categories

    async def get_category(self, slug: str) -> Category:
        result = await self.db.execute(select(Category).where(Category.slug == slug))
        category = result.scalar_one_or_none()
        if category is None:
            raise CategoryNotFoundError(slug)
        category.movie_count = await self._movie_count(category.id)
        return category

    async def get_published_movies(self, category: Category) -> list[Movie]:
        result = await self.db.execute(
            select(Movie)
            .join(movie_categories, movie_categories.c.movie_id == Movie.id)
            .where(movie_categories.c.category_id == category.id, Movie.is_published.is_(True))
            .order_by(Movie.created_at.desc(), Movie.id.desc())
        )
        return list(result.scalars().all())

    async def create_category(self, data: CategoryCreate) -> Category:
        try:
            slug = resolve_slug(data.slug, data.name, max_length=120)
        except ValueError:
            raise ValidationError("Could not derive a slug from the name", field="slug")

        if await self._slug_taken(slug):
            raise DuplicateResourceError("Category", "slug", slug)

        category = Category(name=data.name, slug=slug, description=data.description)
        self.db.add(category)
        await self.db.commit()
        await self.db.refresh(category)
        category.movie_count = 0

        logger.info(f"Category created: id={category.id}, slug={slug}")
        return category

    async def update_category(self, slug: str, data: CategoryUpdate) -> Category:
        category = await self.get_category(slug)

        if data.new_slug and data.new_slug != slug:
            try:
                new_slug = resolve_slug(data.new_slug, data.new_slug, max_length=120)
            except ValueError:
                raise ValidationError("Could not derive a slug", field="new_slug")
            if new_slug != slug and await self._slug_taken(new_slug):
                raise DuplicateResourceError("Category", "slug", new_slug)
            category.slug = new_slug

        if data.name:
            category.name = data.name
        if "description" in data.model_fields_set:
            category.description = data.description

        movie_count = category.movie_count
        await self.db.commit()
        await self.db.refresh(category)
        category.movie_count = movie_count

        logger.info(f"Category updated: id={category.id}")
        return category

    async def delete_category(self, slug: str) -> None:
        category = await self.get_category(slug)
        if category.movie_count > 0:
            raise ResourceInUseError("Category", slug, "movies", category.movie_count)

        await self.db.delete(category)
        await self.db.commit()
        logger.info(f"Category deleted: slug={slug}")

    async def get_category_stats(self) -> list[dict]:
        """Movie totals, published totals and summed views per category."""
        result = await self.db.execute(
            select(
                Category.id,
                Category.name,
                Category.slug,
                func.count(Movie.id).label("movie_count"),
                func.count(Movie.id).filter(Movie.is_published.is_(True)).label("published_count"),
                func.coalesce(func.sum(Movie.view_count), 0).label("total_views"),
            )
            .outerjoin(movie_categories, movie_categories.c.category_id == Category.id)
            .outerjoin(Movie, Movie.id == movie_categories.c.movie_id)
            .group_by(Category.id, Category.name, Category.slug)
            .order_by(Category.name.asc())
        )
        return [dict(row._mapping) for row in result.all()]
