from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from streamcms.auth import require_admin
from streamcms.database import get_db
from streamcms.models.user import User
from streamcms.schemas.category import (
    CategoryCreate,
    CategoryDetailResponse,
    CategoryMovie,
    CategoryResponse,
    CategoryStats,
    CategoryUpdate,
)
from streamcms.services.category_service import CategoryService

router = APIRouter(tags=["Categories"])


@router.get("", response_model=List[CategoryResponse])
async def list_categories(
    search: Optional[str] = Query(None, description="Matches name or description"),
    db: AsyncSession = Depends(get_db),
):
    return await CategoryService(db).list_categories(search)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryCreate,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    return await CategoryService(db).create_category(data)


# Declared before /{slug} so "stats" is not taken for a slug
@router.get("/stats", response_model=List[CategoryStats])
async def category_stats(
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    return await CategoryService(db).get_category_stats()


@router.get("/{slug}", response_model=CategoryDetailResponse)
async def get_category(slug: str, db: AsyncSession = Depends(get_db)) -> CategoryDetailResponse:
    service = CategoryService(db)
    category = await service.get_category(slug)
    movies = await service.get_published_movies(category)
    return CategoryDetailResponse(
        **CategoryResponse.model_validate(category).model_dump(),
        movies=[CategoryMovie.model_validate(m) for m in movies],
    )


@router.put("/{slug}", response_model=CategoryResponse)
async def update_category(
    slug: str,
    data: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    return await CategoryService(db).update_category(slug, data)


@router.delete("/{slug}")
async def delete_category(
    slug: str,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    await CategoryService(db).delete_category(slug)
    return {"success": True}
