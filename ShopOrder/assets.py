"""Product images on Cloudinary."""
import logging
from typing import Optional

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader

from config import CLOUDINARY_API_KEY, CLOUDINARY_API_SECRET, CLOUDINARY_CLOUD_NAME
from errors import UploadFailed, UploadRejected

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp", "image/bmp", "image/tiff"}
MAX_FILE_SIZE = 5 * 1024 * 1024


def configure():
    if not CLOUDINARY_API_SECRET:
        logger.warning("Cloudinary API secret is not configured. Image uploads will not work.")
    cloudinary.config(
        cloud_name=CLOUDINARY_CLOUD_NAME,
        api_key=CLOUDINARY_API_KEY,
        api_secret=CLOUDINARY_API_SECRET or "demo",
        secure=True,
    )


def upload_image(data: bytes, content_type: Optional[str]) -> str:
    """Upload image bytes and return the public URL to store on the product."""
    if not data:
        raise UploadRejected("File is empty")
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise UploadRejected("Invalid image format. Allowed formats: JPG, PNG, GIF, WebP, BMP, TIFF")
    if len(data) > MAX_FILE_SIZE:
        raise UploadRejected("File size exceeds maximum limit of 5MB")
    try:
        result = cloudinary.uploader.upload(data, resource_type="auto")
    except (cloudinary.exceptions.Error, OSError) as e:
        logger.error(f"Failed to upload image to Cloudinary: {e}")
        raise UploadFailed(f"Failed to upload image: {e}")
    url = result.get("secure_url") or result.get("url")
    logger.info(f"Image uploaded successfully: {url}")
    return url


def public_id_from_url(image_url: str) -> Optional[str]:
    """``.../image/upload/v123/folder/name.jpg`` -> ``folder/name``."""
    parts = image_url.split("/upload/", 1)
    if len(parts) < 2:
        return None
    segments = parts[1].split("/", 1)
    if len(segments) < 2:
        return None
    path = segments[1]
    if "." in path:
        path = path[:path.rindex(".")]
    return path or None


def delete_image(image_url: str):
    public_id = public_id_from_url(image_url)
    if public_id is None:
        logger.warning(f"Could not extract public id from image URL: {image_url}")
        return
    cloudinary.uploader.destroy(public_id)
    logger.info(f"Image deleted from Cloudinary: {public_id}")


def best_effort(action, *args):
    """Run a cleanup action whose failure must not fail the caller.

    The failure is logged and the function returns False.
    """
    try:
        action(*args)
    except Exception as e:
        logger.warning(f"{action.__name__} failed for {args}: {e}")
        return False
    return True


def discard_image(image_url: Optional[str]):
    if not image_url:
        return
    best_effort(delete_image, image_url)
