"""Project image upload to the external media host (unsigned preset)."""

import logging
import os
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 100 * 1024 * 1024


class ImageRejected(ValueError):
    """Raised before any network call when a file cannot be uploaded."""

    def __init__(self, message: str, reason: str):
        self.reason = reason
        super().__init__(message)


def validate_image(content_type: Optional[str], size: int) -> None:
    """Reject oversize and non-image files. Returns None when the file is acceptable."""
    if not (content_type or "").startswith("image/"):
        raise ImageRejected("Please select an image file", reason="type")
    if size > MAX_IMAGE_BYTES:
        raise ImageRejected("Image size should be less than 100MB", reason="size")


def _upload_url() -> str:
    base = (os.getenv("MEDIA_UPLOAD_URL") or "https://api.cloudinary.com/v1_1").rstrip("/")
    cloud = os.getenv("MEDIA_CLOUD_NAME", "demo")
    return f"{base}/{cloud}/image/upload"


def upload_image(filename: str, content: bytes, content_type: str) -> Optional[str]:
    """Upload an image and return its public URL, or None if the upload failed.

    Validation errors are raised; transport and host errors are logged and
    swallowed so the caller can continue without an image.
    """
    validate_image(content_type, len(content))

    data = {
        "upload_preset": os.getenv("MEDIA_UPLOAD_PRESET", "ysp_projects"),
        "folder": os.getenv("MEDIA_FOLDER", "ysp-projects"),
    }
    files = {"file": (filename, content, content_type)}

    try:
        response = httpx.post(_upload_url(), data=data, files=files, timeout=120)
        response.raise_for_status()
        url = response.json().get("secure_url")
    except (httpx.RequestError, httpx.HTTPStatusError, ValueError) as e:
        logger.warning("Image upload failed for %s: %s", filename, e)
        return None

    if not url:
        logger.warning("Image upload for %s returned no URL", filename)
        return None
    return url
