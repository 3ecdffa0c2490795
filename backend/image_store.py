import io
import logging
from typing import Optional, Union
from urllib.parse import urlparse

import cloudinary.uploader

import config
from errors import UpstreamError

logger = logging.getLogger(__name__)

ImagePayload = Union[str, bytes]


def url_to_public_id(url: str, folder: str = config.CLOUDINARY_FOLDER) -> Optional[str]:
    """
    Derive the Cloudinary public id from a delivery URL:
      https://res.cloudinary.com/demo/image/upload/v17/products/abc123.jpg
      -> products/abc123

    Returns None when the URL has no usable last path segment.
    """
    if not url or not isinstance(url, str):
        return None

    try:
        path = urlparse(url.strip()).path
    except ValueError:
        return None

    filename = path.rstrip("/").rsplit("/", 1)[-1]
    name = filename.split(".", 1)[0]
    if not name:
        return None

    return f"{folder}/{name}" if folder else name


class CloudinaryImageStore:
    """Thin wrapper around the Cloudinary upload API. No retries."""

    def __init__(
        self,
        cloud_name: str = config.CLOUDINARY_CLOUD_NAME,
        api_key: str = config.CLOUDINARY_API_KEY,
        api_secret: str = config.CLOUDINARY_API_SECRET,
        folder: str = config.CLOUDINARY_FOLDER,
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder

    @property
    def is_configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def _credentials(self) -> dict:
        return {
            "cloud_name": self.cloud_name,
            "api_key": self.api_key,
            "api_secret": self.api_secret,
            "secure": True,
        }

    def url_to_public_id(self, url: str) -> Optional[str]:
        return url_to_public_id(url, folder=self.folder)

    def upload(self, content: ImagePayload) -> str:
        """Upload a data URI, remote URL or raw bytes; return the secure URL."""
        if not self.is_configured:
            raise UpstreamError("Cloudinary not configured")

        file = io.BytesIO(content) if isinstance(content, (bytes, bytearray)) else content

        try:
            result = cloudinary.uploader.upload(
                file,
                folder=self.folder,
                resource_type="image",
                **self._credentials(),
            )
        except Exception as exc:
            raise UpstreamError(f"Image upload failed: {exc}") from exc

        url = (result or {}).get("secure_url") or (result or {}).get("url")
        if not url:
            raise UpstreamError("Image upload returned no URL")

        logger.info("Uploaded image %s", url)
        return url

    def delete(self, public_id: str) -> None:
        if not self.is_configured:
            raise UpstreamError("Cloudinary not configured")

        try:
            result = cloudinary.uploader.destroy(
                public_id,
                resource_type="image",
                **self._credentials(),
            )
        except Exception as exc:
            raise UpstreamError(f"Image delete failed: {exc}") from exc

        status = (result or {}).get("result")
        if status != "ok":
            raise UpstreamError(f"Image delete for {public_id} returned {status!r}")


# Dependency for FastAPI - overridden in tests
def get_image_store() -> CloudinaryImageStore:
    return CloudinaryImageStore()
