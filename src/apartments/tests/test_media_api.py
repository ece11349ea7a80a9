import os
from unittest import mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from django.urls import reverse
from rest_framework.test import APITestCase

from src.apartments.factories import AdminUserFactory, UserFactory
from src.apartments.validators import validate_image_file
from .helpers import TempMediaMixin, image_upload


class MediaUploadTests(TempMediaMixin, APITestCase):
    def setUp(self):
        self.use_temp_media()
        self.admin = AdminUserFactory()
        self.upload_dir = os.path.join(self.tmpdir.name, "uploads")

    def stored(self):
        if not os.path.isdir(self.upload_dir):
            return []
        return sorted(os.listdir(self.upload_dir))

    def test_single_upload(self):
        self.client.force_authenticate(self.admin)
        r = self.client.post(reverse("apartments:media-upload"),
                             {"image": image_upload("Beach House.png")}, format="multipart")
        self.assertEqual(r.status_code, 201, r.data)
        item = r.data["file"]
        self.assertEqual(item["originalName"], "Beach House.png")
        self.assertEqual(item["mimetype"], "image/png")
        self.assertTrue(item["filename"].endswith(".png"))
        self.assertNotEqual(item["filename"], "Beach House.png")
        self.assertEqual(item["path"], f"/uploads/{item['filename']}")
        self.assertEqual(self.stored(), [item["filename"]])

    def test_single_upload_without_file(self):
        self.client.force_authenticate(self.admin)
        r = self.client.post(reverse("apartments:media-upload"), {}, format="multipart")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data, {"error": "No file uploaded"})

    def test_non_image_is_rejected(self):
        self.client.force_authenticate(self.admin)
        bogus = SimpleUploadedFile("script.png", b"#!/bin/sh", content_type="image/png")
        r = self.client.post(reverse("apartments:media-upload"), {"image": bogus}, format="multipart")
        self.assertEqual(r.status_code, 400)
        self.assertIn("error", r.data)
        self.assertEqual(self.stored(), [])

    @override_settings(APARTMENT_IMAGE_MAX_MB=0)
    def test_size_limit(self):
        self.client.force_authenticate(self.admin)
        r = self.client.post(reverse("apartments:media-upload"),
                             {"image": image_upload("big.png")}, format="multipart")
        self.assertEqual(r.status_code, 400)
        self.assertIn("File too large", r.data["error"])

    def test_upload_requires_admin(self):
        url = reverse("apartments:media-upload")
        self.assertIn(self.client.post(url, {"image": image_upload()}, format="multipart").status_code, (401, 403))
        self.client.force_authenticate(UserFactory())
        self.assertEqual(self.client.post(url, {"image": image_upload()}, format="multipart").status_code, 403)

    def test_multiple_upload(self):
        self.client.force_authenticate(self.admin)
        files = [image_upload("a.png"), image_upload("b.jpg", fmt="JPEG")]
        r = self.client.post(reverse("apartments:media-upload-multiple"), {"images": files}, format="multipart")
        self.assertEqual(r.status_code, 201, r.data)
        self.assertEqual(len(r.data["files"]), 2)
        self.assertEqual(r.data["message"], "2 file(s) uploaded successfully")
        self.assertEqual(len(self.stored()), 2)

    def test_multiple_upload_validates_each_file_once(self):
        self.client.force_authenticate(self.admin)
        files = [image_upload("a.png"), image_upload("b.png"), image_upload("c.png")]
        with mock.patch("src.apartments.views_modules.media.validate_image_file",
                        wraps=validate_image_file) as validate:
            r = self.client.post(reverse("apartments:media-upload-multiple"), {"images": files}, format="multipart")
        self.assertEqual(r.status_code, 201, r.data)
        self.assertEqual(validate.call_count, 3)

    def test_multiple_upload_is_all_or_nothing(self):
        self.client.force_authenticate(self.admin)
        bogus = SimpleUploadedFile("bad.gif", b"nope", content_type="image/gif")
        files = [image_upload("good.png"), bogus]
        r = self.client.post(reverse("apartments:media-upload-multiple"), {"images": files}, format="multipart")
        self.assertEqual(r.status_code, 400)
        self.assertTrue(r.data["error"].startswith("bad.gif"))
        self.assertEqual(self.stored(), [])

    @override_settings(MEDIA_UPLOAD_MAX_FILES=2)
    def test_multiple_upload_limit(self):
        self.client.force_authenticate(self.admin)
        files = [image_upload(f"{i}.png") for i in range(3)]
        r = self.client.post(reverse("apartments:media-upload-multiple"), {"images": files}, format="multipart")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(self.stored(), [])


class MediaFileTests(TempMediaMixin, APITestCase):
    def setUp(self):
        self.use_temp_media()
        self.admin = AdminUserFactory()
        self.client.force_authenticate(self.admin)
        r = self.client.post(reverse("apartments:media-upload"),
                             {"image": image_upload("room.png")}, format="multipart")
        self.filename = r.data["file"]["filename"]
        self.client.force_authenticate(None)

    def test_list_is_public(self):
        r = self.client.get(reverse("apartments:media-files"))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["count"], 1)
        self.assertEqual(r.data["files"][0]["filename"], self.filename)
        self.assertGreater(r.data["files"][0]["size"], 0)

    def test_download(self):
        r = self.client.get(reverse("apartments:media-file", args=[self.filename]))
        self.assertEqual(r.status_code, 200)
        body = b"".join(r.streaming_content)
        self.assertTrue(body.startswith(b"\x89PNG"))

    def test_missing_file(self):
        r = self.client.get(reverse("apartments:media-file", args=["nothing-here.png"]))
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.data, {"error": "File not found"})

    def test_hidden_names_are_refused(self):
        r = self.client.get(reverse("apartments:media-file", args=[".env"]))
        self.assertEqual(r.status_code, 400)

    def test_delete_requires_admin(self):
        url = reverse("apartments:media-file", args=[self.filename])
        self.assertIn(self.client.delete(url).status_code, (401, 403))
        self.client.force_authenticate(UserFactory())
        self.assertEqual(self.client.delete(url).status_code, 403)

    def test_admin_deletes(self):
        self.client.force_authenticate(self.admin)
        url = reverse("apartments:media-file", args=[self.filename])
        r = self.client.delete(url)
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["filename"], self.filename)
        self.assertEqual(self.client.delete(url).status_code, 404)
