from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=120)
    description: Optional[str] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    new_slug: Optional[str] = Field(None, max_length=120, description="Replacement slug; must not already be taken.")
    description: Optional[str] = None


class CategorySummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str


class CategoryResponse(CategorySummary):
    description: Optional[str] = None
    movie_count: int = 0
    created_at: datetime
    updated_at: datetime


class CategoryMovie(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    slug: str
    synopsis: Optional[str] = None
    poster_url: Optional[str] = None
    release_year: Optional[int] = None
    duration: Optional[int] = None
    featured: bool
    view_count: int


class CategoryDetailResponse(CategoryResponse):
    movies: List[CategoryMovie] = []


class CategoryStats(BaseModel):
    id: int
    name: str
    slug: str
    movie_count: int
    published_count: int
    total_views: int
