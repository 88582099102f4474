"""Blog post management."""

import logging
from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from src.errors import NotFoundError, ValidationError, service_errors
from src.models import BlogPost, Comment
from src.services.access import require_owner

# Configure logging
logger = logging.getLogger(__name__)

NOT_FOUND = "Blog post not found"
EDITABLE_FIELDS = ("title", "content", "image_urls", "video_urls")


def get_post(db: Session, post_id: str) -> Optional[BlogPost]:
    return db.get(BlogPost, post_id)


def get_owned_post(db: Session, post_id: str, caller_id: str, forbidden: str) -> BlogPost:
    """Fetch a post and enforce that caller_id is its author."""
    return require_owner(get_post(db, post_id), caller_id, NOT_FOUND, forbidden)


def commit_and_refresh(db: Session, post: BlogPost, failure: str) -> BlogPost:
    """
    Commit pending changes and re-fetch the post with its author.

    Raises:
        ValidationError: If the commit fails; the message carries the storage error
    """
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"{failure}: {e}")
        raise ValidationError(f"{failure}: {e}") from e
    db.refresh(post)
    return post


@service_errors("Failed to create blog post")
def create(db: Session, data: dict, author_id: str) -> BlogPost:
    """
    Create a post authored by author_id.

    Args:
        db: Database session
        data: title, content and optionally image_urls / video_urls
        author_id: Authenticated user id

    Returns:
        BlogPost: The stored post
    """
    logger.info(f"Creating new blog post: {data.get('title')}")

    post = BlogPost(
        title=data["title"],
        content=data["content"],
        image_urls=list(data.get("image_urls") or []),
        video_urls=list(data.get("video_urls") or []),
        author_id=author_id,
    )
    db.add(post)
    commit_and_refresh(db, post, "Failed to create post")

    logger.info(f"Blog post created successfully: {post.id}")
    return post


@service_errors("Failed to fetch blog posts")
def find_all(db: Session) -> List[BlogPost]:
    """List every post, newest first."""
    logger.info("Fetching all blog posts")
    posts = (
        db.query(BlogPost)
        .options(selectinload(BlogPost.author))
        .order_by(BlogPost.created_at.desc())
        .all()
    )
    logger.info(f"Found {len(posts)} blog posts")
    return posts


@service_errors("Failed to fetch blog post")
def find_one(db: Session, post_id: str) -> BlogPost:
    """
    Fetch a post with its author and its comments.

    Raises:
        NotFoundError: If the post does not exist
    """
    logger.info(f"Fetching blog post {post_id}")

    post = (
        db.query(BlogPost)
        .options(
            selectinload(BlogPost.author),
            selectinload(BlogPost.comments).selectinload(Comment.author),
        )
        .filter(BlogPost.id == post_id)
        .first()
    )
    if post is None:
        logger.warning(f"Blog post not found: {post_id}")
        raise NotFoundError(NOT_FOUND)
    return post


@service_errors("Failed to update blog post")
def update(db: Session, post_id: str, fields: dict, caller_id: str) -> BlogPost:
    """
    Apply a partial update to a post owned by caller_id.

    Raises:
        NotFoundError: If the post does not exist
        ForbiddenError: If caller_id is not the author
    """
    logger.info(f"Updating blog post {post_id}")

    post = get_owned_post(db, post_id, caller_id, "You can only update your own posts")

    for field in EDITABLE_FIELDS:
        if field in fields and fields[field] is not None:
            value = fields[field]
            setattr(post, field, list(value) if field.endswith("_urls") else value)
            logger.debug(f"Updated {field} for post {post_id}")

    commit_and_refresh(db, post, "Failed to update post")

    logger.info(f"Blog post {post_id} updated successfully")
    return post


@service_errors("Failed to delete blog post")
def remove(db: Session, post_id: str, caller_id: str) -> dict:
    """
    Delete a post owned by caller_id, together with its comments.

    Returns:
        dict: Confirmation message

    Raises:
        NotFoundError: If the post does not exist
        ForbiddenError: If caller_id is not the author
    """
    logger.info(f"Deleting blog post {post_id}")

    post = get_owned_post(db, post_id, caller_id, "You can only delete your own posts")

    db.delete(post)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise ValidationError(f"Failed to delete post: {e}") from e

    logger.info(f"Blog post {post_id} deleted")
    return {"message": "Blog post deleted successfully"}


@service_errors("Failed to fetch user blog posts")
def find_by_author(db: Session, author_id: str) -> List[BlogPost]:
    """List the posts of one author, newest first."""
    logger.info(f"Fetching blog posts of user {author_id}")
    return (
        db.query(BlogPost)
        .options(selectinload(BlogPost.author))
        .filter(BlogPost.author_id == author_id)
        .order_by(BlogPost.created_at.desc())
        .all()
    )
