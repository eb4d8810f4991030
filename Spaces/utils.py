# Spaces/utils.py
import logging
import os
import secrets

from django.conf import settings
from django.core.files.storage import default_storage
from django.utils import timezone

from .exceptions import StorageError

logger = logging.getLogger(__name__)

AVATARS_BUCKET = "avatars"
SPACE_IMAGES_BUCKET = "space-images"


def build_file_path(bucket, path, filename):
    """
    Unique storage key: <bucket>/<path>/<millis>-<random>.<ext>
    """
    ext = os.path.splitext(filename)[1].lstrip(".").lower() or "bin"
    stamp = int(timezone.now().timestamp() * 1000)
    name = f"{stamp}-{secrets.token_hex(6)}.{ext}"
    parts = [bucket, str(path).strip("/"), name]
    return "/".join(p for p in parts if p)


def upload_file(bucket, path, file):
    """
    Store ``file`` under ``bucket``/``path`` and return its public URL.
    Existing files are never overwritten.
    """
    target = build_file_path(bucket, path, file.name)

    try:
        saved_name = default_storage.save(target, file)
        url = default_storage.url(saved_name)
    except OSError as exc:
        logger.error(f"Upload to {bucket} failed for {target}: {exc}", exc_info=True)
        raise StorageError(f"Upload failed: {exc}") from exc

    logger.info(f"Uploaded {saved_name} to bucket {bucket}")
    return url


def delete_file(bucket, path):
    """Remove a stored file. Missing files count as deleted."""
    name = path if str(path).startswith(f"{bucket}/") else f"{bucket}/{path}"

    try:
        default_storage.delete(name)
    except OSError as exc:
        logger.error(f"Delete from {bucket} failed for {name}: {exc}", exc_info=True)
        raise StorageError(f"Delete failed: {exc}") from exc

    logger.info(f"Deleted {name} from bucket {bucket}")
    return True


def discard_replaced_file(bucket, path):
    """
    Delete a file whose row already points at its replacement. A failure
    leaves an orphan behind but does not undo the replacement.
    """
    try:
        return delete_file(bucket, path)
    except StorageError:
        logger.warning(f"Left orphaned file {path} in bucket {bucket}")
        return False


def storage_path_from_url(url):
    """Reverse of default_storage.url() for files we stored ourselves."""
    media_url = settings.MEDIA_URL
    if not url:
        return None
    marker = url.find(media_url)
    if marker == -1:
        return None
    return url[marker + len(media_url):]
