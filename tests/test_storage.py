"""Bucket provisioning and best-effort removal."""

from src.storage import MediaBucket, init_buckets, media_bucket, profile_bucket


def test_create_existing_bucket_is_success(tmp_path):
    bucket = MediaBucket("blog-media", str(tmp_path), "http://testserver")

    assert bucket.create() is True
    assert bucket.create() is False
    assert bucket.path.is_dir()


def test_init_buckets_twice():
    init_buckets()
    init_buckets()

    assert media_bucket.path.is_dir()
    assert profile_bucket.path.is_dir()


def test_remove_quietly_reports_missing_object(tmp_path):
    bucket = MediaBucket("blog-media", str(tmp_path), "http://testserver")
    bucket.create()

    result = bucket.remove_quietly("images/missing.png")

    assert result.removed is False
    assert result.error


def test_remove_quietly_deletes_object(tmp_path):
    bucket = MediaBucket("blog-media", str(tmp_path), "http://testserver")
    bucket.create()
    bucket.upload("images/a.png", b"png", "image/png")

    result = bucket.remove_quietly("images/a.png")

    assert result.removed is True
    assert not bucket.exists("images/a.png")
