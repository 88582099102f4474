"""Media upload and attachment of media URLs to blog posts."""

import time
import uuid
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from src.errors import ValidationError, service_errors
from src.models import BlogPost
from src.services.blog_posts import get_owned_post, commit_and_refresh
from src.storage import MediaBucket, StorageError, CleanupResult

# Configure logging
logger = logging.getLogger(__name__)

FORBIDDEN = "You can only modify your own posts"


@dataclass
class MediaFile:
    """An uploaded file as received from the client."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data) if self.data else 0

    @property
    def is_image(self) -> bool:
        return self.content_type.startswith("image/")

    @property
    def is_video(self) -> bool:
        return self.content_type.startswith("video/")


def storage_key(media: MediaFile) -> str:
    """
    Build a unique object key for an upload.

    Keys look like images/1700000000000-k3x9qa.png, with the folder chosen by
    the declared MIME type. The suffix is the text after the last dot of the
    original name, or the whole name when it has no dot.
    """
    extension = media.filename.rsplit(".", 1)[-1] or "file"
    name = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}.{extension}"

    if media.is_image:
        return f"images/{name}"
    if media.is_video:
        return f"videos/{name}"
    return f"other/{name}"


def upload_files(bucket: MediaBucket, files: List[MediaFile]) -> Tuple[List[str], List[str]]:
    """
    Upload a batch of files and collect their public URLs.

    The batch is all-or-nothing from the caller's point of view: the first
    failing file aborts the call. Files stored before the failure are left
    in the bucket.

    Args:
        bucket: Target bucket
        files: Files to store, in order

    Returns:
        Tuple[List[str], List[str]]: Image URLs and video URLs. Files of any
        other type are stored but not returned.

    Raises:
        ValidationError: If the batch is empty, a file is empty or an upload fails
    """
    if not files:
        raise ValidationError("No files provided for upload")

    logger.info(f"Uploading {len(files)} files to {bucket.name}")

    image_urls: List[str] = []
    video_urls: List[str] = []

    for media in files:
        logger.info(f"Processing file: {media.filename}, size: {media.size} bytes, type: {media.content_type}")

        if media.size == 0:
            logger.error(f"File {media.filename} is empty")
            raise ValidationError(f"File {media.filename} is empty or corrupted")

        key = storage_key(media)
        try:
            bucket.upload(key, media.data, content_type=media.content_type, upsert=False)
        except StorageError as e:
            logger.error(f"Upload of {media.filename} failed: {e}")
            raise ValidationError(f"Failed to upload file: {media.filename}") from e

        public_url = bucket.get_public_url(key)
        if media.is_image:
            image_urls.append(public_url)
        elif media.is_video:
            video_urls.append(public_url)
        else:
            logger.warning(f"Unknown file type, skipping: {media.content_type}")

    logger.info(f"All files uploaded successfully. Images: {len(image_urls)}, Videos: {len(video_urls)}")
    return image_urls, video_urls


@service_errors("Failed to add media to blog post")
def add_media_to_post(
    db: Session,
    post_id: str,
    caller_id: str,
    image_urls: Optional[List[str]] = None,
    video_urls: Optional[List[str]] = None,
) -> BlogPost:
    """
    Append media URLs to a post owned by caller_id.

    New URLs go after the existing ones; duplicates are kept.

    Raises:
        NotFoundError: If the post does not exist
        ForbiddenError: If caller_id is not the author
    """
    logger.info(f"Adding media to blog post {post_id}")

    post = get_owned_post(db, post_id, caller_id, FORBIDDEN)

    post.image_urls = list(post.image_urls or []) + list(image_urls or [])
    post.video_urls = list(post.video_urls or []) + list(video_urls or [])

    return commit_and_refresh(db, post, "Failed to add media to post")


def _release(bucket: MediaBucket, url: str, folder: str) -> Optional[CleanupResult]:
    if not bucket.owns_url(url):
        return None
    file_name = url.rstrip("/").split("/")[-1]
    if not file_name:
        return None
    return bucket.remove_quietly(f"{folder}/{file_name}")


@service_errors("Failed to remove media from blog post")
def remove_media_from_post(
    db: Session,
    bucket: MediaBucket,
    post_id: str,
    caller_id: str,
    image_url: Optional[str] = None,
    video_url: Optional[str] = None,
) -> BlogPost:
    """
    Remove media URLs from a post owned by caller_id.

    Every occurrence of the given URL is dropped from its list. A URL that is
    not in the list leaves that list unchanged. Removed URLs that point into
    the bucket also have their object deleted, best-effort. Unlike an
    unconditional delete, a bucket URL that is not on this post never
    touches the bucket, so objects used by other posts survive.

    Raises:
        NotFoundError: If the post does not exist
        ForbiddenError: If caller_id is not the author
    """
    logger.info(f"Removing media from blog post {post_id}")

    post = get_owned_post(db, post_id, caller_id, FORBIDDEN)

    current_images = list(post.image_urls or [])
    current_videos = list(post.video_urls or [])

    if image_url and image_url in current_images:
        post.image_urls = [url for url in current_images if url != image_url]
        _release(bucket, image_url, "images")

    if video_url and video_url in current_videos:
        post.video_urls = [url for url in current_videos if url != video_url]
        _release(bucket, video_url, "videos")

    return commit_and_refresh(db, post, "Failed to remove media from post")
