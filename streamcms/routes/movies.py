"""
Movie Routes

Catalog listing and admin CRUD for movies.  Anonymous and non-admin
callers only ever see published movies.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from streamcms.auth import get_optional_user, require_admin
from streamcms.constants import DEFAULT_MOVIES_PER_PAGE, MAX_PAGE_SIZE
from streamcms.database import get_db
from streamcms.models.user import User
from streamcms.schemas.movie import MovieCreate, MovieListResponse, MovieResponse, MovieUpdate, Pagination
from streamcms.services.movie_service import MovieService, page_count

router = APIRouter(tags=["Movies"])


def _is_admin(user: Optional[User]) -> bool:
    return user is not None and user.is_admin


@router.get("", response_model=MovieListResponse)
async def list_movies(
    search: Optional[str] = Query(None, description="Matches title or synopsis"),
    category: Optional[str] = Query(None, description="Category slug"),
    published: Optional[bool] = None,
    featured: Optional[bool] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_MOVIES_PER_PAGE, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
) -> MovieListResponse:
    if not _is_admin(user):
        published = True

    movies, total = await MovieService(db).list_movies(
        search=search,
        category=category,
        published=published,
        featured=featured,
        page=page,
        limit=limit,
    )
    return MovieListResponse(
        movies=[MovieResponse.model_validate(m) for m in movies],
        pagination=Pagination(page=page, limit=limit, total=total, pages=page_count(total, limit)),
    )


@router.post("", response_model=MovieResponse, status_code=status.HTTP_201_CREATED)
async def create_movie(
    data: MovieCreate,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    return await MovieService(db).create_movie(data)


@router.get("/{slug}", response_model=MovieResponse)
async def get_movie(
    slug: str,
    db: AsyncSession = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    return await MovieService(db).get_movie(slug, published_only=not _is_admin(user))


@router.put("/{slug}", response_model=MovieResponse)
async def update_movie(
    slug: str,
    data: MovieUpdate,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    return await MovieService(db).update_movie(slug, data)


@router.delete("/{slug}")
async def delete_movie(
    slug: str,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    await MovieService(db).delete_movie(slug)
    return {"success": True}
