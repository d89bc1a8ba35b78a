from .category import Category
from .comment import Comment
from .movie import Movie
from .movie_categories import movie_categories
from .user import Role, User

__all__ = [
    "Category",
    "Comment",
    "Movie",
    "movie_categories",
    "Role",
    "User",
]
