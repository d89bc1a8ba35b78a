from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from streamcms.schemas.category import CategorySummary


class MovieBase(BaseModel):
    synopsis: Optional[str] = Field(None, description="A short description of the movie.")
    release_year: Optional[int] = Field(None, ge=1870, le=2100)
    duration: Optional[int] = Field(None, ge=1, description="Running time in minutes.")
    language: Optional[str] = Field(None, max_length=50)
    poster_url: Optional[str] = Field(None, max_length=500)
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    meta_keywords: Optional[str] = None


class MovieCreate(MovieBase):
    title: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255, description="Generated from the title when omitted.")
    video_url: str = Field(..., min_length=1, max_length=500)
    is_published: bool = False
    featured: bool = False
    category_ids: List[int] = []

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Quantum Paradox",
                "video_url": "https://cdn.example.com/quantum-paradox.m3u8",
                "synopsis": "A physicist loops through the same afternoon.",
                "release_year": 2024,
                "duration": 118,
                "is_published": True,
                "category_ids": [1, 3],
            }
        }
    )


class MovieUpdate(MovieBase):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    new_slug: Optional[str] = Field(None, max_length=255)
    video_url: Optional[str] = Field(None, min_length=1, max_length=500)
    is_published: Optional[bool] = None
    featured: Optional[bool] = None
    category_ids: Optional[List[int]] = Field(None, description="Replaces the movie's categories when given.")


class MovieResponse(MovieBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    slug: str
    video_url: str
    is_published: bool
    featured: bool
    view_count: int
    created_at: datetime
    updated_at: datetime
    categories: List[CategorySummary] = []


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class MovieListResponse(BaseModel):
    movies: List[MovieResponse]
    pagination: Pagination


class ViewCountResponse(BaseModel):
    """Body returned by the view increment endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    view_count: int = Field(..., alias="viewCount", ge=0)
