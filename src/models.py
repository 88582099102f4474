"""Database models for BlogPlatformAPI."""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, JSON, select, func
from sqlalchemy.orm import declarative_base, relationship, column_property

Base = declarative_base()


def new_id() -> str:
    """Generate an opaque record identifier."""
    return str(uuid.uuid4())


class User(Base):
    """User model for authentication and authorship."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    surname = Column(String, nullable=False)
    username = Column(String, unique=True, nullable=False, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    profile_picture = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Deleting a user removes everything they authored
    posts = relationship("BlogPost", back_populates="author", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="author", cascade="all, delete-orphan")


class BlogPost(Base):
    """Blog post model with ordered media URL lists."""

    __tablename__ = "blog_posts"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    author_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    image_urls = Column(JSON, default=list, nullable=False)
    video_urls = Column(JSON, default=list, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    author = relationship("User", back_populates="posts")
    comments = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="Comment.created_at",
    )


class Comment(Base):
    """Comment model."""

    __tablename__ = "comments"

    id = Column(String(36), primary_key=True, default=new_id)
    content = Column(Text, nullable=False)
    post_id = Column(String(36), ForeignKey("blog_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    author = relationship("User", back_populates="comments")
    post = relationship("BlogPost", back_populates="comments")


BlogPost.comment_count = column_property(
    select(func.count(Comment.id))
    .where(Comment.post_id == BlogPost.id)
    .correlate_except(Comment)
    .scalar_subquery()
)
