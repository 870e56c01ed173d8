"""Asset store HTTP client.

Uploads product and banner images to a Cloudinary-compatible hosting
service and deletes them by storage identifier. Images are re-encoded
as WebP before upload.
"""

import asyncio
import hashlib
import io
import time
from dataclasses import dataclass
from typing import Any

import httpx
import structlog
from PIL import Image, UnidentifiedImageError

from storefront.domain.exceptions import UploadError
from storefront.infrastructure.config import settings

logger = structlog.get_logger()

WEBP_FORMAT = "webp"


@dataclass(frozen=True)
class UploadedAsset:
    """Image stored on the asset host."""

    url: str
    public_id: str

    def to_dict(self) -> dict[str, str]:
        """Convert to the embedded document shape."""
        return {"url": self.url, "public_id": self.public_id}


def to_webp(data: bytes, quality: int = 80) -> bytes:
    """Re-encode image bytes as WebP.

    Args:
        data: Source image in any format Pillow can read.
        quality: WebP quality (0-100).

    Returns:
        WebP-encoded bytes.

    Raises:
        UploadError: If the bytes are not a readable image or exceed
            Pillow's pixel limit.
    """
    try:
        with Image.open(io.BytesIO(data)) as source:
            source.load()
            image = source
            if image.mode not in ("RGB", "RGBA"):
                has_alpha = "A" in image.getbands() or "transparency" in image.info
                image = image.convert("RGBA" if has_alpha else "RGB")
            buffer = io.BytesIO()
            image.save(buffer, format="WEBP", quality=quality)
            return buffer.getvalue()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise UploadError(f"Could not process image: {e}") from e


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    """Compute the request signature expected by the asset host.

    Parameters are sorted by name, joined as ``k=v`` pairs with ``&``,
    suffixed with the API secret and SHA-1 hashed.

    Args:
        params: Signed request parameters.
        api_secret: Account API secret.

    Returns:
        Hex digest signature.
    """
    payload = "&".join(f"{key}={params[key]}" for key in sorted(params) if params[key] is not None)
    return hashlib.sha1(f"{payload}{api_secret}".encode()).hexdigest()


def _json_body(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError as e:
        raise UploadError("Asset store returned invalid JSON") from e
    if not isinstance(body, dict):
        raise UploadError("Asset store returned an unexpected response")
    return body


class AssetStoreClient:
    """HTTP client for the image hosting service.

    Example usage:
        client = AssetStoreClient(cloud_name="demo", api_key="...", api_secret="...")
        asset = await client.upload(image_bytes)
        await client.delete(asset.public_id)
    """

    def __init__(
        self,
        cloud_name: str | None = None,
        api_key: str | None = None,
        api_secret: str | None = None,
        base_url: str | None = None,
        folder: str | None = None,
        timeout: float | None = None,
        quality: int | None = None,
    ) -> None:
        """Initialize asset store client.

        Unset arguments fall back to the application settings.

        Args:
            cloud_name: Account (cloud) name.
            api_key: API key.
            api_secret: API secret used for signing.
            base_url: API root URL.
            folder: Folder uploads are stored in.
            timeout: Request timeout in seconds.
            quality: WebP quality for uploads.
        """
        self.cloud_name = cloud_name or settings.cloudinary_cloud_name
        self.api_key = api_key or settings.cloudinary_api_key
        self.api_secret = api_secret or settings.cloudinary_api_secret
        self.base_url = (base_url or settings.asset_store_url).rstrip("/")
        self.folder = folder or settings.cloudinary_folder
        self.timeout = timeout or settings.asset_store_timeout
        self.quality = quality or settings.image_quality
        self._client: httpx.AsyncClient | None = None

    @property
    def configured(self) -> bool:
        """Whether credentials are present."""
        return bool(self.cloud_name and self.api_key and self.api_secret)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=f"{self.base_url}/{self.cloud_name}",
                timeout=self.timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _signed(self, params: dict[str, Any]) -> dict[str, Any]:
        params = {**params, "timestamp": int(time.time())}
        return {
            **params,
            "api_key": self.api_key,
            "signature": sign_params(params, self.api_secret or ""),
        }

    async def upload(self, data: bytes) -> UploadedAsset:
        """Convert an image to WebP and upload it.

        Args:
            data: Raw image bytes.

        Returns:
            Hosted URL and storage identifier.

        Raises:
            UploadError: On transform, transport or host failure.
        """
        if not self.configured:
            raise UploadError("Asset store is not configured")

        webp = await asyncio.to_thread(to_webp, data, self.quality)
        form = self._signed({"folder": self.folder, "format": WEBP_FORMAT})

        try:
            client = await self._get_client()
            response = await client.post(
                "/image/upload",
                data=form,
                files={"file": ("upload.webp", webp, "image/webp")},
            )
        except httpx.TimeoutException as e:
            logger.warning("Asset upload timed out", timeout=self.timeout)
            raise UploadError("Asset upload timed out") from e
        except httpx.HTTPError as e:
            logger.warning("Asset upload failed", error=str(e))
            raise UploadError(f"Asset upload failed: {e}") from e

        if response.status_code != 200:
            logger.warning(
                "Asset store rejected upload",
                status_code=response.status_code,
                body=response.text[:200],
            )
            raise UploadError(
                f"Asset store rejected upload: {response.status_code}",
                details={"status_code": response.status_code},
            )

        body = _json_body(response)
        url = body.get("secure_url") or body.get("url")
        public_id = body.get("public_id")
        if not url or not public_id:
            raise UploadError("Asset store returned an incomplete response")

        logger.info("Asset uploaded", public_id=public_id, size=len(webp))
        return UploadedAsset(url=url, public_id=public_id)

    async def delete(self, public_id: str) -> bool:
        """Delete an asset by storage identifier.

        Args:
            public_id: Storage identifier.

        Returns:
            True if the asset was removed, False if the host did not know it.

        Raises:
            UploadError: On transport or host failure.
        """
        if not self.configured:
            raise UploadError("Asset store is not configured")

        form = self._signed({"public_id": public_id})

        try:
            client = await self._get_client()
            response = await client.post("/image/destroy", data=form)
        except httpx.TimeoutException as e:
            raise UploadError("Asset delete timed out", details={"public_id": public_id}) from e
        except httpx.HTTPError as e:
            raise UploadError(f"Asset delete failed: {e}", details={"public_id": public_id}) from e

        if response.status_code != 200:
            raise UploadError(
                f"Asset store rejected delete: {response.status_code}",
                details={"public_id": public_id, "status_code": response.status_code},
            )

        result = _json_body(response).get("result")
        if result == "ok":
            logger.info("Asset deleted", public_id=public_id)
            return True
        if result == "not found":
            return False
        raise UploadError(
            f"Unexpected delete result: {result}",
            details={"public_id": public_id},
        )


# Global client instance
_asset_store: AssetStoreClient | None = None


def get_asset_store() -> AssetStoreClient:
    """Get the asset store client singleton.

    Returns:
        AssetStoreClient instance.
    """
    global _asset_store
    if _asset_store is None:
        _asset_store = AssetStoreClient()
    return _asset_store


async def close_asset_store() -> None:
    """Close the singleton client, if one was created."""
    global _asset_store
    if _asset_store is not None:
        await _asset_store.close()
    _asset_store = None
