import hashlib
from dataclasses import replace
from unittest.mock import MagicMock, patch

import pytest

from canteen.domain.errors import ValidationError
from canteen.services.image_storage import ImageStorage


@pytest.fixture
def cloud_settings(settings):
    return replace(
        settings,
        cloudinary_cloud_name="demo",
        cloudinary_api_key="key",
        cloudinary_api_secret="shh",
    )


def test_rejects_unsupported_format(cloud_settings):
    with pytest.raises(ValidationError):
        ImageStorage(cloud_settings).upload("anim.gif", b"GIF89a")


def test_requires_credentials(settings):
    storage = ImageStorage(settings)

    assert storage.configured is False
    with pytest.raises(RuntimeError):
        storage.upload("photo.jpg", b"jpg")


def test_signed_upload(cloud_settings):
    response = MagicMock()
    response.json.return_value = {"secure_url": "https://res.cloudinary.com/demo/photo.jpg"}

    with patch("canteen.services.image_storage.requests.post", return_value=response) as post, patch(
        "canteen.services.image_storage.time.time", return_value=1700000000
    ):
        url = ImageStorage(cloud_settings).upload("photo.jpg", b"jpg")

    assert url == "https://res.cloudinary.com/demo/photo.jpg"
    args, kwargs = post.call_args
    assert args[0] == "https://api.cloudinary.com/v1_1/demo/image/upload"
    expected = hashlib.sha1(b"folder=sainik-canteen-products&timestamp=1700000000shh").hexdigest()
    assert kwargs["data"]["signature"] == expected
    assert kwargs["data"]["api_key"] == "key"
    assert kwargs["files"] == {"file": ("photo.jpg", b"jpg")}
