"""
app/services/media_service.py

Purpose: Image hosting (Cloudinary)

- Signed uploads of in-memory image buffers
- Returns the hosted secure URL
- Bounded timeout, no retries: failures surface to the caller as UploadError
"""

import base64
import hashlib
import time
from typing import Optional, Dict, Any

import httpx

from app.core.config import settings
from app.core.exceptions import UploadError
from app.core.logging import get_logger

logger = get_logger(__name__)

# Parameters Cloudinary leaves out of the signature
UNSIGNED_PARAMS = {"file", "api_key", "resource_type", "cloud_name"}


def sign_params(params: Dict[str, Any], api_secret: str) -> str:
    """
    Computes a Cloudinary request signature.

    Sorted key=value pairs joined by '&', followed by the API secret, SHA-1 hex.
    """
    to_sign = "&".join(
        f"{key}={params[key]}"
        for key in sorted(params)
        if key not in UNSIGNED_PARAMS and params[key] not in (None, "")
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


def to_data_uri(content: bytes, content_type: str) -> str:
    return f"data:{content_type};base64,{base64.b64encode(content).decode('ascii')}"


class CloudinaryService:
    """
    Service for uploading images to Cloudinary's REST upload API.
    """

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.cloud_name = cloud_name or settings.CLOUDINARY_CLOUD_NAME
        self.api_key = api_key or settings.CLOUDINARY_API_KEY
        self.api_secret = api_secret or settings.CLOUDINARY_API_SECRET
        self.base_url = (base_url or settings.CLOUDINARY_BASE_URL).rstrip("/")
        self._timeout = timeout or settings.MEDIA_UPLOAD_TIMEOUT
        self._transport = transport

    @property
    def upload_url(self) -> str:
        return f"{self.base_url}/{self.cloud_name}/image/upload"

    async def upload(self, content: bytes, content_type: str, folder: Optional[str] = None) -> str:
        """
        Uploads an image and returns its hosted URL.

        Args:
            content: Raw image bytes
            content_type: MIME type of the image
            folder: Optional Cloudinary folder

        Returns:
            secure_url of the uploaded image

        Raises:
            UploadError: On missing credentials, network failure, timeout or provider rejection
        """
        if not (self.cloud_name and self.api_key and self.api_secret):
            logger.error("Cloudinary credentials are not configured")
            raise UploadError("Image upload failed: image hosting is not configured")

        params: Dict[str, Any] = {"timestamp": int(time.time())}
        if folder:
            params["folder"] = folder
        params["signature"] = sign_params(params, self.api_secret)
        params["api_key"] = self.api_key
        params["file"] = to_data_uri(content, content_type)

        logger.info(f"Uploading image to Cloudinary ({len(content)} bytes, {content_type})")

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self.upload_url, data=params)
        except httpx.TimeoutException:
            logger.error("Cloudinary upload timed out")
            raise UploadError("Image upload failed: image host timed out")
        except httpx.RequestError as e:
            logger.error(f"Network error uploading to Cloudinary: {e}")
            raise UploadError("Image upload failed: unable to reach image host")

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.status_code not in (200, 201):
            error = payload.get("error", {}) if isinstance(payload, dict) else {}
            reason = error.get("message") if isinstance(error, dict) else None
            logger.error(f"Cloudinary rejected upload: {response.status_code} {reason or response.text[:200]}")
            raise UploadError(
                f"Image upload failed: {reason or 'image host returned ' + str(response.status_code)}",
                details={"status_code": response.status_code}
            )

        url = payload.get("secure_url") if isinstance(payload, dict) else None
        if not url:
            logger.error("Cloudinary response missing secure_url")
            raise UploadError("Image upload failed: image host returned no URL")

        logger.info(f"Cloudinary upload success: {url}")
        return url

    async def close(self):
        """Cleanup (for compatibility)."""
        return None


# Global media service instance
_media_service: Optional[CloudinaryService] = None


def get_media_service() -> CloudinaryService:
    """Get or create the global media service instance."""
    global _media_service
    if _media_service is None:
        _media_service = CloudinaryService()
    return _media_service


async def close_media_service():
    """Close media service and cleanup resources."""
    global _media_service
    if _media_service:
        await _media_service.close()
        _media_service = None
