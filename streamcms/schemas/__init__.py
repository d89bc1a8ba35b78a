from .category import CategoryCreate, CategoryDetailResponse, CategoryResponse, CategoryStats, CategoryUpdate
from .comment import CommentCreate, CommentListResponse, CommentResponse, CommentUpdate
from .dashboard import DashboardStats
from .movie import MovieCreate, MovieListResponse, MovieResponse, MovieUpdate, Pagination, ViewCountResponse
from .upload import PosterUploadResponse
from .user import Token, UserCreate, UserResponse

__all__ = [
    "CategoryCreate",
    "CategoryDetailResponse",
    "CategoryResponse",
    "CategoryStats",
    "CategoryUpdate",
    "CommentCreate",
    "CommentListResponse",
    "CommentResponse",
    "CommentUpdate",
    "DashboardStats",
    "MovieCreate",
    "MovieListResponse",
    "MovieResponse",
    "MovieUpdate",
    "Pagination",
    "ViewCountResponse",
    "PosterUploadResponse",
    "Token",
    "UserCreate",
    "UserResponse",
]
