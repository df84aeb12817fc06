# foodprint/core/storage_utils.py
import io
import logging
import uuid
from functools import lru_cache

from minio import Minio

from foodprint.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

PUBLIC_READ_ACL = "public-read"
LOCAL_UPLOAD_PREFIX = "/uploads/"


def is_storage_configured() -> bool:
    """True only when bucket, endpoint, key and secret are all set."""
    return bool(
        settings.DO_BUCKET_NAME
        and settings.DO_ENDPOINT
        and settings.DO_KEY_ID
        and settings.DO_SECRET
    )


def _endpoint_host() -> str:
    """Spaces endpoint without scheme, e.g. 'nyc3.digitaloceanspaces.com'."""
    endpoint = settings.DO_ENDPOINT or ""
    for scheme in ("https://", "http://"):
        if endpoint.startswith(scheme):
            return endpoint[len(scheme):]
    return endpoint


@lru_cache
def storage_client() -> Minio | None:
    """
    S3-compatible client for DigitalOcean Spaces.

    Returns None when storage is not configured (local development);
    callers then skip the upload and use a local placeholder URL.
    """
    if not is_storage_configured():
        return None
    return Minio(
        _endpoint_host(),
        access_key=settings.DO_KEY_ID,
        secret_key=settings.DO_SECRET,
        secure=True,
    )


def get_upload_params(
    bucket: str,
    content_type: str,
    data: bytes,
    acl: str,
    filename: str,
) -> dict:
    """Keyword arguments for Minio.put_object for a single in-memory file."""
    return {
        "bucket_name": bucket,
        "object_name": filename,
        "data": io.BytesIO(data),
        "length": len(data),
        "content_type": content_type,
        "metadata": {"x-amz-acl": acl},
    }


def resolve_filenames(filename: str, extension: str) -> dict[str, str]:
    """
    Build the stored object name and its public URL.

    The name is forced to lowercase, so stored URLs compare
    case-insensitively.

    Returns:
        {"filename": "<name><ext>", "file_url": "<public url>"}
        Without storage configured the URL is "/uploads/<name><ext>".
    """
    name = filename.lower() + extension
    if is_storage_configured():
        url = f"https://{settings.DO_BUCKET_NAME}.{_endpoint_host()}/{name}"
    else:
        url = LOCAL_UPLOAD_PREFIX + name
    return {"filename": name, "file_url": url}


def upload_to_storage(
    filename: str,
    extension: str,
    file_bytes: bytes,
    content_type: str,
) -> str:
    """
    Upload a public file to Spaces and return its URL.

    When storage is not configured the upload is skipped and the local
    placeholder URL is returned.

    Raises:
        Any exception raised by the Minio client if the upload fails.
    """
    resolved = resolve_filenames(filename, extension)
    client = storage_client()
    if client is None:
        logger.warning("Storage not configured, skipping upload of %s", resolved["filename"])
        return resolved["file_url"]

    params = get_upload_params(
        settings.DO_BUCKET_NAME,
        content_type,
        file_bytes,
        PUBLIC_READ_ACL,
        resolved["filename"],
    )
    client.put_object(**params)
    return resolved["file_url"]


def generate_filename() -> str:
    """Random object name (UUID4, no extension)."""
    return str(uuid.uuid4())
