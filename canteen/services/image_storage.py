# canteen/services/image_storage.py
import hashlib
import time

import requests
from requests import RequestException

from canteen.domain.errors import ValidationError
from canteen.utils.logging import get_logger
from canteen.utils.retry import http_retry
from canteen.utils.settings import Settings

logger = get_logger(__name__)

ALLOWED_FORMATS = ("jpg", "jpeg", "png", "webp")


class ImageStorage:
    """Upload zdjec produktow do Cloudinary (signed upload API)."""

    def __init__(self, settings: Settings):
        self.cloud_name = settings.cloudinary_cloud_name
        self.api_key = settings.cloudinary_api_key
        self.api_secret = settings.cloudinary_api_secret
        self.folder = settings.cloudinary_folder
        self.timeout = settings.http_timeout_seconds

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def _signature(self, params: dict) -> str:
        to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params))
        return hashlib.sha1((to_sign + self.api_secret).encode()).hexdigest()

    def upload(self, filename: str, content: bytes) -> str:
        """Zwraca publiczny URL zdjecia."""
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        if ext not in ALLOWED_FORMATS:
            raise ValidationError(f"Image format not allowed: {ext or 'unknown'}")

        if not self.configured:
            raise RuntimeError("Cloudinary credentials are not configured")

        params = {"folder": self.folder, "timestamp": int(time.time())}
        data = {**params, "api_key": self.api_key, "signature": self._signature(params)}

        body = self._post(data, {"file": (filename, content)})
        logger.info(f"Image {filename} uploaded to {body['secure_url']}")
        return body["secure_url"]

    @http_retry()
    def _post(self, data: dict, files: dict) -> dict:
        url = f"https://api.cloudinary.com/v1_1/{self.cloud_name}/image/upload"
        logger.info(f"ImageStorage POST {url}")

        try:
            resp = requests.post(url, data=data, files=files, timeout=self.timeout)
            resp.raise_for_status()
        except RequestException as e:
            logger.error(f"Cloudinary upload failed: {e}")
            raise
        return resp.json()
