"""Comments router."""

import logging
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.auth import get_current_user
from src.database import get_db
from src.models import User
from src.schemas import CommentCreate, CommentUpdate, CommentOut, MessageResponse
from src.services import comments as comments_service

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/comments", tags=["Comments"])


@router.get("/post/{post_id}", response_model=List[CommentOut])
def list_post_comments(post_id: str, db: Session = Depends(get_db)):
    """List the comments of a post, oldest first."""
    return comments_service.get_comments_by_post(db, post_id)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CommentOut)
def create_comment(
    comment_data: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Comment on a blog post.

    Raises:
        NotFoundError: If the post does not exist
    """
    return comments_service.create(db, comment_data.content, comment_data.post_id, current_user.id)


@router.put("/{comment_id}", response_model=CommentOut)
def update_comment(
    comment_id: str,
    comment_data: CommentUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Update the text of a comment.

    Raises:
        NotFoundError: If the comment does not exist
        ForbiddenError: If the caller is not the author
    """
    return comments_service.update(db, comment_id, comment_data.content, current_user.id)


@router.delete("/{comment_id}", response_model=MessageResponse)
def delete_comment(
    comment_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Delete a comment.

    Raises:
        NotFoundError: If the comment does not exist
        ForbiddenError: If the caller is not the author
    """
    return comments_service.remove(db, comment_id, current_user.id)
