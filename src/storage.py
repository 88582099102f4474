"""Object storage buckets served as static files under /uploads."""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Configure logging
logger = logging.getLogger(__name__)

# Get storage configuration from environment
PATH_UPLOADS = os.getenv("PATH_UPLOADS")
URL_BASE_API = os.getenv("URL_BASE_API", "http://localhost:8000").rstrip("/")
NAME_BUCKET_MEDIA = os.getenv("NAME_BUCKET_MEDIA", "blog-media")
NAME_BUCKET_PROFILE = os.getenv("NAME_BUCKET_PROFILE", "profile-pictures")

if not PATH_UPLOADS:
    raise ValueError("PATH_UPLOADS must be set in .env file")

UPLOADS_URL_PATH = "/uploads"


class StorageError(Exception):
    """Raised when an object cannot be written to a bucket."""


@dataclass
class CleanupResult:
    """Outcome of a best-effort object removal. Callers may ignore it."""

    key: str
    removed: bool
    error: Optional[str] = None


class MediaBucket:
    """
    A public bucket of objects addressed by slash-separated keys.

    Objects live under <PATH_UPLOADS>/<name>/<key> and are published at
    <URL_BASE_API>/uploads/<name>/<key>.
    """

    def __init__(self, name: str, root: str, base_url: str):
        self.name = name
        self.path = Path(root) / name
        self.public_url_prefix = f"{base_url}{UPLOADS_URL_PATH}/{name}/"

    def create(self) -> bool:
        """
        Create the bucket directory.

        Returns:
            bool: True if the bucket was created, False if it already existed
        """
        if self.path.exists():
            logger.info(f"{self.name} bucket already exists")
            return False
        self.path.mkdir(parents=True, exist_ok=True)
        logger.info(f"{self.name} bucket created successfully")
        return True

    def _object_path(self, key: str) -> Path:
        target = (self.path / key).resolve()
        if self.path.resolve() not in target.parents:
            raise StorageError(f"Invalid object key: {key}")
        return target

    def upload(self, key: str, data: bytes, content_type: str, upsert: bool = False) -> str:
        """
        Store an object.

        Args:
            key: Object key, e.g. images/1700000000000-abc123.png
            data: Object content
            content_type: Declared MIME type
            upsert: Overwrite an existing object with the same key

        Returns:
            str: The stored key

        Raises:
            StorageError: If the key exists (and upsert is False) or the write fails
        """
        target = self._object_path(key)
        if target.exists() and not upsert:
            raise StorageError(f"The resource already exists: {key}")

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise StorageError(str(e)) from e

        logger.debug(f"Stored {key} ({content_type}, {len(data)} bytes) in {self.name}")
        return key

    def get_public_url(self, key: str) -> str:
        return f"{self.public_url_prefix}{key}"

    def owns_url(self, url: str) -> bool:
        """Whether url points into this bucket."""
        return self.public_url_prefix in url

    def exists(self, key: str) -> bool:
        return self._object_path(key).is_file()

    def remove_quietly(self, key: str) -> CleanupResult:
        """
        Delete an object without ever raising.

        Args:
            key: Object key

        Returns:
            CleanupResult: Whether the object was removed, and why not
        """
        try:
            self._object_path(key).unlink()
        except (OSError, StorageError) as e:
            logger.warning(f"Could not remove {key} from {self.name}: {e}")
            return CleanupResult(key=key, removed=False, error=str(e))

        logger.info(f"Removed {key} from {self.name}")
        return CleanupResult(key=key, removed=True)


media_bucket = MediaBucket(NAME_BUCKET_MEDIA, PATH_UPLOADS, URL_BASE_API)
profile_bucket = MediaBucket(NAME_BUCKET_PROFILE, PATH_UPLOADS, URL_BASE_API)


def init_buckets():
    """Provision every bucket. An existing bucket counts as success."""
    for bucket in (media_bucket, profile_bucket):
        bucket.create()


def get_media_bucket() -> MediaBucket:
    """Dependency returning the blog media bucket."""
    return media_bucket


def get_profile_bucket() -> MediaBucket:
    """Dependency returning the profile picture bucket."""
    return profile_bucket
