# pawconnect/services/test_storage_service.py
from unittest.mock import MagicMock

import pytest

from pawconnect.core.errors import StorageError
from pawconnect.services.storage_service import StorageService


@pytest.fixture
def bucket():
    bucket = MagicMock()
    bucket.blob.return_value.public_url = "https://cdn.example.com/pet_images/a.jpg"
    return bucket


def test_upload_image_uses_folder_and_extension(bucket):
    service = StorageService(bucket=bucket)

    url = service.upload_image(b"data", "image/jpeg", "Photo.JPG")

    assert url == "https://cdn.example.com/pet_images/a.jpg"
    path = bucket.blob.call_args[0][0]
    assert path.startswith("pet_images/") and path.endswith(".jpg")


def test_extension_falls_back_to_content_type():
    assert StorageService._extension_for("", "image/png") == "png"
    assert StorageService._extension_for("noext", "application/x-unknown-type") == "jpg"


def test_upload_without_bucket_raises():
    with pytest.raises(StorageError):
        StorageService().upload_image(b"data", "image/png", "a.png")


def test_relay_image_degrades_on_failure(bucket):
    bucket.blob.return_value.make_public.side_effect = RuntimeError("permission denied")
    service = StorageService(bucket=bucket)
    service.placeholder_url = "https://placeholder.example.com/pet.png"

    result = service.relay_image(b"data", "image/png", "a.png")

    assert result.degraded is True
    assert result.image_url == "https://placeholder.example.com/pet.png"
