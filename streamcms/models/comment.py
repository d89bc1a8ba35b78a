"""
Comment Model

Comments on movies, left either by signed-in users or by guests.
Guest comments carry their own author name/email and stay unapproved
until a moderator approves them.
"""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from streamcms.database import Base


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    movie_id = Column(Integer, ForeignKey("movies.id", ondelete="CASCADE"), nullable=False, index=True)

    # Null for guest comments
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    author_name = Column(String(100), nullable=True)
    author_email = Column(String(255), nullable=True)

    text = Column(Text, nullable=False)
    ip_address = Column(String(45), nullable=True)

    # Moderation
    is_approved = Column(Boolean, default=False, nullable=False, index=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    movie = relationship("Movie", back_populates="comments", lazy="selectin")
    user = relationship("User", back_populates="comments", lazy="selectin")

    __table_args__ = (
        Index("ix_comments_movie_approved", "movie_id", "is_approved"),
        Index("ix_comments_movie_created", "movie_id", "created_at"),
    )

    @property
    def display_name(self) -> str:
        if self.user is not None:
            return self.user.display_name
        return self.author_name or "Anonymous"

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, movie_id={self.movie_id}, user_id={self.user_id})>"
