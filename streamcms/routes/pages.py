"""
Public Pages

Server-rendered catalog, category and movie pages plus the admin landing page.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from streamcms.auth import get_optional_user
from streamcms.constants import DEFAULT_COMMENTS_PER_PAGE, DEFAULT_MOVIES_PER_PAGE
from streamcms.database import get_db
from streamcms.exceptions import ResourceNotFoundError
from streamcms.models.user import User
from streamcms.services import dashboard_service
from streamcms.services.category_service import CategoryService
from streamcms.services.comment_service import CommentService
from streamcms.services.movie_service import MovieService, page_count
from streamcms.templating import templates

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"], include_in_schema=False)

FEATURED_ON_HOME = 6


def _not_found(request: Request, exc: ResourceNotFoundError):
    return templates.TemplateResponse(
        request, "not_found.html", {"message": exc.message}, status_code=status.HTTP_404_NOT_FOUND
    )


@router.get("/", response_class=HTMLResponse)
async def home(request: Request, db: AsyncSession = Depends(get_db)):
    service = MovieService(db)
    featured, _ = await service.list_movies(published=True, featured=True, limit=FEATURED_ON_HOME)
    latest, _ = await service.list_movies(published=True, limit=DEFAULT_MOVIES_PER_PAGE)
    return templates.TemplateResponse(request, "home.html", {"featured": featured, "latest": latest})


@router.get("/movies", response_class=HTMLResponse)
async def movies_page(
    request: Request,
    search: Optional[str] = None,
    category: Optional[str] = None,
    page: int = Query(1, ge=1),
    db: AsyncSession = Depends(get_db),
):
    movies, total = await MovieService(db).list_movies(
        search=search, category=category, published=True, page=page, limit=DEFAULT_MOVIES_PER_PAGE
    )
    return templates.TemplateResponse(
        request,
        "movies.html",
        {
            "movies": movies,
            "search": search or "",
            "category": category,
            "page": page,
            "pages": page_count(total, DEFAULT_MOVIES_PER_PAGE),
            "total": total,
        },
    )


@router.get("/movies/{slug}", response_class=HTMLResponse)
async def movie_detail(request: Request, slug: str, db: AsyncSession = Depends(get_db)):
    try:
        movie = await MovieService(db).get_movie(slug, published_only=True)
    except ResourceNotFoundError as e:
        return _not_found(request, e)

    comments, comment_total = await CommentService(db).list_comments(
        movie_id=movie.id, approved=True, limit=DEFAULT_COMMENTS_PER_PAGE
    )
    return templates.TemplateResponse(
        request,
        "movie_detail.html",
        {"movie": movie, "comments": comments, "comment_total": comment_total},
    )


@router.get("/movie/{slug}")
async def movie_legacy_redirect(slug: str):
    return RedirectResponse(f"/movies/{slug}", status_code=status.HTTP_308_PERMANENT_REDIRECT)


@router.get("/categories", response_class=HTMLResponse)
async def categories_page(request: Request, db: AsyncSession = Depends(get_db)):
    categories = await CategoryService(db).list_categories()
    return templates.TemplateResponse(request, "categories.html", {"categories": categories})


@router.get("/categories/{slug}", response_class=HTMLResponse)
async def category_detail(request: Request, slug: str, db: AsyncSession = Depends(get_db)):
    service = CategoryService(db)
    try:
        category = await service.get_category(slug)
    except ResourceNotFoundError as e:
        return _not_found(request, e)

    movies = await service.get_published_movies(category)
    return templates.TemplateResponse(request, "category_detail.html", {"category": category, "movies": movies})


@router.get("/admin", response_class=HTMLResponse)
async def admin_home(
    request: Request,
    db: AsyncSession = Depends(get_db),
    user: Optional[User] = Depends(get_optional_user),
):
    if user is None or not user.is_admin:
        return RedirectResponse("/auth/login", status_code=status.HTTP_303_SEE_OTHER)

    stats = await dashboard_service.get_dashboard_stats(db)
    return templates.TemplateResponse(request, "admin.html", {"user": user, "stats": stats})
