from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from streamcms.schemas.movie import Pagination


class CommentCreate(BaseModel):
    """Schema for creating a comment. Guests must supply author_name."""

    movie_id: int
    text: str = Field(..., min_length=1, max_length=5000)
    author_name: Optional[str] = Field(None, min_length=1, max_length=100)
    author_email: Optional[EmailStr] = None


class CommentUpdate(BaseModel):
    """Moderation update; mainly used to flip approval."""

    is_approved: Optional[bool] = None
    text: Optional[str] = Field(None, min_length=1, max_length=5000)


class CommentAuthor(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: Optional[str] = None
    email: str


class CommentMovie(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    slug: str


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    movie_id: int
    user_id: Optional[int] = None
    author_name: Optional[str] = None
    author_email: Optional[str] = None
    text: str
    is_approved: bool
    created_at: datetime
    updated_at: datetime
    user: Optional[CommentAuthor] = None
    movie: Optional[CommentMovie] = None


class CommentListResponse(BaseModel):
    comments: List[CommentResponse]
    pagination: Pagination
