import pytest
from django.core.exceptions import ValidationError
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings

from src.apartments.validators import validate_image_file
from .helpers import image_upload


def test_valid_image_passes_and_is_rewound():
    upload = image_upload("room.jpg", fmt="JPEG")
    assert validate_image_file(upload) is None
    assert upload.tell() == 0


def test_non_image_is_rejected():
    upload = SimpleUploadedFile("room.png", b"plain text", content_type="image/png")
    with pytest.raises(ValidationError, match="Only image files are allowed"):
        validate_image_file(upload)


@override_settings(APARTMENT_IMAGE_ALLOWED_FORMATS={"JPEG"})
def test_format_outside_allowed_set():
    with pytest.raises(ValidationError, match="Unsupported format: PNG"):
        validate_image_file(image_upload("room.png"))


@override_settings(APARTMENT_IMAGE_MAX_WIDTH=32, APARTMENT_IMAGE_MAX_HEIGHT=32)
def test_dimensions_are_limited():
    with pytest.raises(ValidationError, match="64x64px"):
        validate_image_file(image_upload("room.png"))
