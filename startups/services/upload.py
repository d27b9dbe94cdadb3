# startups/services/upload.py
import logging
from typing import Optional

from django.conf import settings

from launchpad.backend import get_supabase_client

logger = logging.getLogger(__name__)


def storage_path(folder: str, user_id: str, filename: str) -> str:
    return f"{folder}/{user_id}/{filename}"


def _read_bytes(file) -> bytes:
    if hasattr(file, "seek"):
        file.seek(0)
    if hasattr(file, "chunks"):
        return b"".join(file.chunks())
    return file.read()


def upload_file(file, folder: str, user_id: str) -> Optional[str]:
    """
    Store one file at {folder}/{user_id}/{filename} in the uploads bucket and
    return its public URL. Same name for the same user overwrites the old object.
    Returns None if anything goes wrong.
    """
    path = storage_path(folder, user_id, file.name)
    bucket = get_supabase_client().storage.from_(settings.STARTUP_UPLOAD_BUCKET)

    try:
        bucket.upload(
            path=path,
            file=_read_bytes(file),
            file_options={
                "content-type": getattr(file, "content_type", None) or "application/octet-stream",
                "upsert": "true",
            },
        )
        url = bucket.get_public_url(path)
    except Exception:
        logger.exception("Upload failed for %s", path)
        return None

    logger.info("Uploaded %s", path)
    return url
