"""Blog posts router for post CRUD and media attachments."""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, status, UploadFile, File, Form
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.orm import Session

from src.auth import get_current_user
from src.database import get_db
from src.errors import ValidationError
from src.models import User
from src.schemas import (
    BlogPostCreate,
    BlogPostUpdate,
    BlogPostOut,
    BlogPostListItem,
    BlogPostDetail,
    MediaRemove,
    MessageResponse,
)
from src.services import blog_posts as blog_posts_service
from src.services import media as media_service
from src.storage import MediaBucket, get_media_bucket
from src.uploads import read_media_files

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/blog-posts", tags=["Blog Posts"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=BlogPostOut)
def create_post(
    post_data: BlogPostCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Create a blog post with text content and optional media URLs.

    Args:
        post_data: Title, content and optional image/video URLs
        current_user: Authenticated user, recorded as author
        db: Database session

    Returns:
        BlogPostOut: Created post with its author
    """
    return blog_posts_service.create(db, post_data.model_dump(), current_user.id)


@router.post("/with-media", status_code=status.HTTP_201_CREATED, response_model=BlogPostOut)
def create_post_with_media(
    title: str = Form(...),
    content: str = Form(...),
    files: Optional[List[UploadFile]] = File(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    bucket: MediaBucket = Depends(get_media_bucket),
):
    """
    Upload images/videos and create a blog post in one request.

    Args:
        title: Post title
        content: Post content
        files: Up to 10 image/video files
        current_user: Authenticated user, recorded as author
        db: Database session
        bucket: Media bucket

    Returns:
        BlogPostOut: Created post with the uploaded media URLs

    Raises:
        ValidationError: If no files were sent, a file is rejected or an upload fails
    """
    try:
        post_data = BlogPostCreate(title=title, content=content)
    except SchemaValidationError as e:
        raise ValidationError("; ".join(err["msg"] for err in e.errors())) from e

    media_files = read_media_files(files)
    image_urls, video_urls = media_service.upload_files(bucket, media_files)

    data = post_data.model_dump()
    data.update(image_urls=image_urls, video_urls=video_urls)
    return blog_posts_service.create(db, data, current_user.id)


@router.put("/{post_id}/media", response_model=BlogPostOut)
def add_media(
    post_id: str,
    files: Optional[List[UploadFile]] = File(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    bucket: MediaBucket = Depends(get_media_bucket),
):
    """
    Upload files and append their URLs to an existing post.

    Raises:
        NotFoundError: If the post does not exist
        ForbiddenError: If the caller is not the author
    """
    media_files = read_media_files(files)
    image_urls, video_urls = media_service.upload_files(bucket, media_files)
    return media_service.add_media_to_post(db, post_id, current_user.id, image_urls, video_urls)


@router.delete("/{post_id}/media", response_model=BlogPostOut)
def remove_media(
    post_id: str,
    media: MediaRemove,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    bucket: MediaBucket = Depends(get_media_bucket),
):
    """
    Remove an image URL and/or a video URL from a post.

    Raises:
        NotFoundError: If the post does not exist
        ForbiddenError: If the caller is not the author
    """
    return media_service.remove_media_from_post(
        db, bucket, post_id, current_user.id, media.image_url, media.video_url
    )


@router.get("", response_model=List[BlogPostListItem])
def list_posts(db: Session = Depends(get_db)):
    """List all blog posts with author and comment count, newest first."""
    return blog_posts_service.find_all(db)


@router.get("/user/my-posts", response_model=List[BlogPostListItem])
def list_my_posts(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List the authenticated user's posts, newest first."""
    return blog_posts_service.find_by_author(db, current_user.id)


@router.get("/{post_id}", response_model=BlogPostDetail)
def get_post(post_id: str, db: Session = Depends(get_db)):
    """
    Get a blog post with its author and comments.

    Raises:
        NotFoundError: If post not found
    """
    return blog_posts_service.find_one(db, post_id)


@router.put("/{post_id}", response_model=BlogPostOut)
def update_post(
    post_id: str,
    update_data: BlogPostUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Update blog post fields.

    Args:
        post_id: Blog post ID
        update_data: Fields to update
        current_user: Authenticated user
        db: Database session

    Returns:
        BlogPostOut: Updated post

    Raises:
        NotFoundError: If post not found
        ForbiddenError: If the caller is not the author
    """
    fields = update_data.model_dump(exclude_unset=True)
    return blog_posts_service.update(db, post_id, fields, current_user.id)


@router.delete("/{post_id}", response_model=MessageResponse)
def delete_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Delete a blog post and its comments.

    Raises:
        NotFoundError: If post not found
        ForbiddenError: If the caller is not the author
    """
    return blog_posts_service.remove(db, post_id, current_user.id)
