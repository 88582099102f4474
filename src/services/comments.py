"""Comment management."""

import logging
from typing import List
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from src.errors import NotFoundError, ValidationError, service_errors
from src.models import Comment
from src.services.access import require_owner
from src.services.blog_posts import get_post

# Configure logging
logger = logging.getLogger(__name__)

NOT_FOUND = "Comment not found"


def _commit(db: Session, failure: str):
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"{failure}: {e}")
        raise ValidationError(f"{failure}: {e}") from e


@service_errors("Failed to create comment")
def create(db: Session, content: str, post_id: str, author_id: str) -> Comment:
    """
    Comment on an existing post.

    Raises:
        NotFoundError: If the post does not exist
    """
    logger.info(f"Creating comment on post {post_id}")

    if get_post(db, post_id) is None:
        logger.warning(f"Blog post not found: {post_id}")
        raise NotFoundError("Blog post not found")

    comment = Comment(content=content, post_id=post_id, author_id=author_id)
    db.add(comment)
    _commit(db, "Failed to create comment")
    db.refresh(comment)

    logger.info(f"Comment {comment.id} created on post {post_id}")
    return comment


@service_errors("Failed to fetch comments")
def get_comments_by_post(db: Session, post_id: str) -> List[Comment]:
    """List the comments of a post, oldest first."""
    logger.info(f"Fetching comments for post {post_id}")
    return (
        db.query(Comment)
        .options(selectinload(Comment.author))
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at.asc())
        .all()
    )


@service_errors("Failed to update comment")
def update(db: Session, comment_id: str, content: str, caller_id: str) -> Comment:
    """
    Replace the text of a comment owned by caller_id.

    Raises:
        NotFoundError: If the comment does not exist
        ForbiddenError: If caller_id is not the author
    """
    logger.info(f"Updating comment {comment_id}")

    comment = require_owner(
        db.get(Comment, comment_id), caller_id, NOT_FOUND, "You can only update your own comments"
    )
    comment.content = content
    _commit(db, "Failed to update comment")
    db.refresh(comment)
    return comment


@service_errors("Failed to delete comment")
def remove(db: Session, comment_id: str, caller_id: str) -> dict:
    """
    Delete a comment owned by caller_id.

    Raises:
        NotFoundError: If the comment does not exist
        ForbiddenError: If caller_id is not the author
    """
    logger.info(f"Deleting comment {comment_id}")

    comment = require_owner(
        db.get(Comment, comment_id), caller_id, NOT_FOUND, "You can only delete your own comments"
    )
    db.delete(comment)
    _commit(db, "Failed to delete comment")

    logger.info(f"Comment {comment_id} deleted")
    return {"message": "Comment deleted successfully"}
