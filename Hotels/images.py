"""
Room photo hosting on ImgBB.
"""
import base64
import logging
from typing import Optional

import httpx

from config import MAX_IMAGE_BYTES
from exceptions import ImageUploadError

logger = logging.getLogger(__name__)

IMGBB_UPLOAD_URL = "https://api.imgbb.com/1/upload"


class ImgBBClient:
    """Uploads images and returns their public URL."""

    def __init__(
        self,
        api_key: Optional[str],
        max_bytes: int = MAX_IMAGE_BYTES,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.max_bytes = max_bytes
        self.timeout = timeout
        self._transport = transport

    def upload(self, content: bytes) -> str:
        """
        Upload raw image bytes.

        Args:
            content: Image file content.

        Returns:
            Public URL of the hosted image.

        Raises:
            ImageUploadError: If the payload is too large, no API key is
                configured, or the host does not answer with a usable 200.
        """
        if len(content) > self.max_bytes:
            raise ImageUploadError("Image size exceeds the allowed limit (5MB)")
        if not self.api_key:
            raise ImageUploadError("Image host API key is not configured")

        encoded = base64.b64encode(content).decode("ascii")
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(
                    IMGBB_UPLOAD_URL,
                    params={"key": self.api_key},
                    data={"image": encoded},
                )
        except httpx.HTTPError as exc:
            logger.warning("Image upload request failed: %s", exc)
            raise ImageUploadError(f"Failed to upload image to ImgBB: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise ImageUploadError(f"ImgBB upload failed with status: {response.status_code}")

        try:
            url = response.json()["data"]["url"]
        except (ValueError, KeyError, TypeError) as exc:
            raise ImageUploadError("ImgBB response did not contain an image URL") from exc

        logger.info("Image uploaded", extra={"bytes": len(content)})
        return url
