from io import BytesIO
from tempfile import TemporaryDirectory

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from PIL import Image


def make_image_bytes(size=(64, 64), color=(200, 100, 50), fmt="PNG"):
    file = BytesIO()
    Image.new("RGB", size, color).save(file, fmt)
    file.seek(0)
    return file.read()


def image_upload(name="photo.png", **kwargs):
    fmt = kwargs.pop("fmt", "PNG")
    content_type = "image/jpeg" if fmt == "JPEG" else f"image/{fmt.lower()}"
    return SimpleUploadedFile(name, make_image_bytes(fmt=fmt, **kwargs), content_type=content_type)


class TempMediaMixin:
    """Point MEDIA_ROOT at a throwaway directory for the duration of a test."""

    def use_temp_media(self):
        self.tmpdir = TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        override = override_settings(MEDIA_ROOT=self.tmpdir.name)
        override.enable()
        self.addCleanup(override.disable)
