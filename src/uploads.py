"""Upload policy applied to multipart files before they reach the services."""

import time
import uuid
import logging
from pathlib import PurePosixPath
from typing import List, Optional
from fastapi import UploadFile

from src.errors import ValidationError
from src.services.media import MediaFile
from src.storage import MediaBucket, StorageError

# Configure logging
logger = logging.getLogger(__name__)

MAX_FILES_PER_REQUEST = 10

MB = 1024 * 1024
MAX_IMAGE_SIZE = 10 * MB
MAX_VIDEO_SIZE = 50 * MB
MAX_PROFILE_PICTURE_SIZE = 5 * MB

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}
ALLOWED_VIDEO_TYPES = {
    "video/mp4",
    "video/mpeg",
    "video/quicktime",
    "video/x-msvideo",
    "video/webm",
    "video/ogg",
}
PROFILE_PICTURE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


def _read(upload: UploadFile) -> MediaFile:
    return MediaFile(
        filename=upload.filename or "file",
        content_type=upload.content_type or "application/octet-stream",
        data=upload.file.read(),
    )


def read_media_files(files: Optional[List[UploadFile]]) -> List[MediaFile]:
    """
    Validate and read blog media uploads.

    Args:
        files: Files from the multipart "files" field

    Returns:
        List[MediaFile]: File contents, in request order

    Raises:
        ValidationError: If no files were sent, too many were sent, or one
            has a disallowed type or size
    """
    if not files:
        raise ValidationError("No files uploaded")

    if len(files) > MAX_FILES_PER_REQUEST:
        raise ValidationError(f"Too many files. Max: {MAX_FILES_PER_REQUEST}")

    media_files = []
    for upload in files:
        media = _read(upload)

        if media.content_type in ALLOWED_IMAGE_TYPES:
            max_size = MAX_IMAGE_SIZE
        elif media.content_type in ALLOWED_VIDEO_TYPES:
            max_size = MAX_VIDEO_SIZE
        else:
            logger.warning(f"Rejected upload {media.filename} of type {media.content_type}")
            raise ValidationError(
                "Invalid file type. Allowed: images (JPEG, PNG, GIF, WebP) "
                "and videos (MP4, MPEG, MOV, AVI, WebM, OGG)"
            )

        if media.size > max_size:
            raise ValidationError(f"File too large. Max size: {max_size // MB}MB")

        media_files.append(media)

    return media_files


def store_profile_picture(bucket: MediaBucket, upload: UploadFile) -> str:
    """
    Validate a profile picture and store it in the profile bucket.

    Returns:
        str: Public URL of the stored picture

    Raises:
        ValidationError: If the file is not an accepted image or is too large
    """
    media = _read(upload)
    extension = PurePosixPath(media.filename).suffix.lower()

    if extension not in PROFILE_PICTURE_EXTENSIONS:
        raise ValidationError("Only image files are allowed for profile pictures!")
    if media.size == 0:
        raise ValidationError(f"File {media.filename} is empty or corrupted")
    if media.size > MAX_PROFILE_PICTURE_SIZE:
        raise ValidationError(f"File too large. Max size: {MAX_PROFILE_PICTURE_SIZE // MB}MB")

    key = f"profile-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}{extension}"
    try:
        bucket.upload(key, media.data, content_type=media.content_type)
    except StorageError as e:
        logger.error(f"Failed to store profile picture {media.filename}: {e}")
        raise ValidationError(f"Failed to upload file: {media.filename}") from e

    logger.info(f"Stored profile picture {key}")
    return bucket.get_public_url(key)
