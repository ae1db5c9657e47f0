"""Cloudinary image hosting.

Uploads go to Cloudinary's signed REST upload endpoint with httpx. The
signature is the SHA-1 of the sorted upload parameters followed by the API
secret.
"""

from __future__ import annotations

import hashlib
import logging
import time
from pathlib import Path

import httpx

from artpivot.settings import Settings

logger = logging.getLogger(__name__)

UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"
UPLOAD_TIMEOUT = 60.0


class ImageHostNotConfigured(RuntimeError):
    """Cloudinary credentials are missing from the settings."""


class ImageHostError(RuntimeError):
    """Cloudinary rejected the upload or could not be reached."""


def sign_params(params: dict[str, str], api_secret: str) -> str:
    payload = "&".join(f"{k}={params[k]}" for k in sorted(params))
    return hashlib.sha1((payload + api_secret).encode("utf-8")).hexdigest()


class CloudinaryHost:
    def __init__(self, settings: Settings, client: httpx.Client | None = None):
        if not settings.cloudinary_configured:
            raise ImageHostNotConfigured("Cloudinary environment variables are not set")
        self.cloud_name = settings.cloudinary_cloud_name
        self.api_key = settings.cloudinary_api_key
        self.api_secret = settings.cloudinary_api_secret
        self.folder = settings.cloudinary_folder
        self._client = client

    def upload(self, path: Path, filename: str | None = None) -> str:
        """Upload an image file and return its public HTTPS URL."""
        params = {"folder": self.folder, "timestamp": str(int(time.time()))}
        data = {
            **params,
            "api_key": self.api_key,
            "signature": sign_params(params, self.api_secret),
        }
        url = UPLOAD_URL.format(cloud_name=self.cloud_name)

        client = self._client or httpx.Client(timeout=httpx.Timeout(UPLOAD_TIMEOUT))
        try:
            with open(path, "rb") as f:
                resp = client.post(url, data=data, files={"file": (filename or path.name, f)})
            resp.raise_for_status()
            body = resp.json()
        except (httpx.HTTPStatusError, httpx.RequestError, ValueError) as e:
            logger.error("Cloudinary upload failed: %s", e)
            raise ImageHostError(str(e)) from e
        finally:
            if self._client is None:
                client.close()

        if not isinstance(body, dict):
            raise ImageHostError("Cloudinary response was not a JSON object")
        secure_url = body.get("secure_url")
        if not secure_url:
            raise ImageHostError("Cloudinary response had no secure_url")
        logger.info("Uploaded %s to Cloudinary", filename or path.name)
        return secure_url
