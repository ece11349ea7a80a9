import logging
import os
import random
import time

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.files.storage import default_storage
from django.http import FileResponse
from rest_framework import status
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiResponse, OpenApiTypes

from ..permissions import IsAdmin, IsAdminOrReadOnly
from ..serializers import MediaFileSerializer, MediaUploadSerializer, MediaMultipleUploadSerializer
from ..throttling import MediaUploadThrottle
from ..validators import validate_image_file

logger = logging.getLogger(__name__)


def upload_dir():
    return getattr(settings, "MEDIA_UPLOAD_DIR", "uploads")


def unique_filename(original_name):
    """`photo.jpg` -> `photo-<ms timestamp>-<random>.jpg`"""
    stem, ext = os.path.splitext(os.path.basename(original_name or "file"))
    stem = stem or "file"
    return f"{stem}-{int(time.time() * 1000)}-{random.randint(0, 10 ** 9)}{ext.lower()}"


def is_safe_filename(filename):
    return bool(filename) and filename == os.path.basename(filename) and not filename.startswith(".")


def describe(name, request, uploaded=None):
    """Response item for a stored file."""
    filename = os.path.basename(name)
    item = {
        "filename": filename,
        "path": f"/{upload_dir()}/{filename}",
        "url": request.build_absolute_uri(default_storage.url(name)),
        "size": uploaded.size if uploaded is not None else default_storage.size(name),
    }
    if uploaded is not None:
        item["originalName"] = uploaded.name
        item["mimetype"] = getattr(uploaded, "content_type", "") or ""
    else:
        try:
            item["uploadedAt"] = default_storage.get_created_time(name)
        except (NotImplementedError, OSError):
            item["uploadedAt"] = None
    return item


def store_upload(uploaded, validated=False):
    """Save an image under the upload dir; returns the storage name."""
    if not validated:
        validate_image_file(uploaded)
    name = default_storage.save(f"{upload_dir()}/{unique_filename(uploaded.name)}", uploaded)
    logger.info("media stored: %s (%s bytes)", name, uploaded.size)
    return name


class MediaUploadView(APIView):
    permission_classes = [IsAdmin]
    parser_classes = (MultiPartParser, FormParser)
    throttle_classes = [MediaUploadThrottle]

    @extend_schema(
        summary="Upload an image",
        request=MediaUploadSerializer,
        responses={
            201: MediaFileSerializer,
            400: OpenApiResponse(description="No file or invalid image"),
            403: OpenApiResponse(description="Admin access required"),
        },
    )
    def post(self, request):
        uploaded = request.FILES.get("image")
        if uploaded is None:
            return Response({"error": "No file uploaded"}, status=status.HTTP_400_BAD_REQUEST)
        try:
            name = store_upload(uploaded)
        except DjangoValidationError as e:
            return Response({"error": e.messages[0]}, status=status.HTTP_400_BAD_REQUEST)
        return Response(
            {"message": "File uploaded successfully", "file": describe(name, request, uploaded)},
            status=status.HTTP_201_CREATED,
        )


class MediaMultipleUploadView(APIView):
    permission_classes = [IsAdmin]
    parser_classes = (MultiPartParser, FormParser)
    throttle_classes = [MediaUploadThrottle]

    @extend_schema(
        summary="Upload several images",
        request=MediaMultipleUploadSerializer,
        responses={
            201: MediaFileSerializer(many=True),
            400: OpenApiResponse(description="No files, too many files or an invalid image"),
            403: OpenApiResponse(description="Admin access required"),
        },
    )
    def post(self, request):
        files = request.FILES.getlist("images")
        if not files:
            return Response({"error": "No files uploaded"}, status=status.HTTP_400_BAD_REQUEST)
        max_files = int(getattr(settings, "MEDIA_UPLOAD_MAX_FILES", 10))
        if len(files) > max_files:
            return Response({"error": f"Too many files: max {max_files}"}, status=status.HTTP_400_BAD_REQUEST)

        # all or nothing: validate every file before the first save
        for uploaded in files:
            try:
                validate_image_file(uploaded)
            except DjangoValidationError as e:
                return Response({"error": f"{uploaded.name}: {e.messages[0]}"}, status=status.HTTP_400_BAD_REQUEST)

        stored = [describe(store_upload(uploaded, validated=True), request, uploaded) for uploaded in files]
        return Response(
            {"message": f"{len(stored)} file(s) uploaded successfully", "files": stored},
            status=status.HTTP_201_CREATED,
        )


class MediaFileListView(APIView):
    permission_classes = [IsAdminOrReadOnly]

    @extend_schema(summary="List uploaded files", responses={200: MediaFileSerializer(many=True)})
    def get(self, request):
        directory = upload_dir()
        names = []
        if default_storage.exists(directory):
            _, names = default_storage.listdir(directory)
        files = [describe(f"{directory}/{name}", request) for name in sorted(names) if is_safe_filename(name)]
        return Response({"count": len(files), "files": files})


class MediaFileView(APIView):
    permission_classes = [IsAdminOrReadOnly]

    def _resolve(self, filename):
        if not is_safe_filename(filename):
            return None, Response({"error": "Invalid filename"}, status=status.HTTP_400_BAD_REQUEST)
        name = f"{upload_dir()}/{filename}"
        if not default_storage.exists(name):
            return None, Response({"error": "File not found"}, status=status.HTTP_404_NOT_FOUND)
        return name, None

    @extend_schema(
        summary="Download a file",
        responses={
            (200, "application/octet-stream"): OpenApiTypes.BINARY,
            404: OpenApiResponse(description="File not found"),
        },
    )
    def get(self, request, filename):
        name, error = self._resolve(filename)
        if error is not None:
            return error
        return FileResponse(default_storage.open(name, "rb"), filename=filename)

    @extend_schema(
        summary="Delete a file",
        responses={
            200: OpenApiResponse(description="File deleted"),
            403: OpenApiResponse(description="Admin access required"),
            404: OpenApiResponse(description="File not found"),
        },
    )
    def delete(self, request, filename):
        name, error = self._resolve(filename)
        if error is not None:
            return error
        default_storage.delete(name)
        logger.info("media deleted: %s", name)
        return Response({"message": "File deleted successfully", "filename": filename})
