from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from streamcms.database import Base
from streamcms.models.movie_categories import movie_categories


class Movie(Base):
    __tablename__ = "movies"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String(255), index=True, nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    synopsis = Column(Text, nullable=True)
    release_year = Column(Integer, nullable=True)
    duration = Column(Integer, nullable=True)  # minutes
    language = Column(String(50), nullable=True)
    poster_url = Column(String(500), nullable=True)
    video_url = Column(String(500), nullable=False)
    is_published = Column(Boolean, default=False, nullable=False)
    featured = Column(Boolean, default=False, nullable=False)

    # Only ever changed by the atomic increment in view_service
    view_count = Column(Integer, default=0, server_default="0", nullable=False)

    # Metadata fields
    meta_title = Column(Text, nullable=True)
    meta_description = Column(Text, nullable=True)
    meta_keywords = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    categories = relationship(
        "Category", secondary=movie_categories, back_populates="movies", lazy="selectin"
    )
    comments = relationship("Comment", back_populates="movie", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_movies_published_created", "is_published", "created_at"),
        Index("idx_movies_featured", "featured"),
    )

    def __repr__(self) -> str:
        return f"<Movie(id={self.id}, slug={self.slug!r}, views={self.view_count})>"
