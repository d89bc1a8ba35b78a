from typing import List

from pydantic import BaseModel


class TopMovie(BaseModel):
    id: int
    title: str
    slug: str
    view_count: int


class DashboardStats(BaseModel):
    total_movies: int
    published_movies: int
    featured_movies: int
    total_categories: int
    total_comments: int
    pending_comments: int
    total_views: int
    top_movies: List[TopMovie]
