import logging

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from rest_framework import viewsets, permissions, status
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import JSONParser, MultiPartParser, FormParser
from rest_framework.response import Response
from drf_spectacular.utils import (
    extend_schema_view, extend_schema, OpenApiParameter, OpenApiTypes,
    OpenApiExample, OpenApiResponse
)

from ..models import Apartment, ApartmentImage
from ..permissions import IsAdminOrReadOnly
from ..serializers import (
    ApartmentSerializer, ApartmentImageSerializer, ApartmentImageUploadSerializer,
    BookedRangeSerializer,
)
from ..services import DateRange, normalize_date
from ..throttling import MediaUploadThrottle
from ..validators import validate_image_file

logger = logging.getLogger(__name__)


def delete_image_file(file_field):
    """Remove the stored file behind an ImageField, if any."""
    if not file_field:
        return
    storage = file_field.storage
    name = file_field.name
    if name and storage.exists(name):
        storage.delete(name)


@extend_schema_view(
    list=extend_schema(
        summary="List apartments",
        description="All apartments, newest first.",
        responses={200: ApartmentSerializer(many=True)},
    ),
    create=extend_schema(
        summary="Create apartment",
        description="Create an apartment (admin only). Multipart requests may carry "
                    "`mainImage` and up to 10 `images`.",
        responses={
            201: ApartmentSerializer,
            400: OpenApiResponse(description="Validation error"),
            403: OpenApiResponse(description="Admin access required"),
        },
    ),
    retrieve=extend_schema(
        summary="Get apartment",
        responses={
            200: ApartmentSerializer,
            404: OpenApiResponse(description="Apartment not found"),
        },
    ),
    update=extend_schema(
        summary="Update apartment",
        description="Update an apartment (admin only).",
        responses={
            200: ApartmentSerializer,
            400: OpenApiResponse(description="Validation error"),
            403: OpenApiResponse(description="Admin access required"),
            404: OpenApiResponse(description="Apartment not found"),
        },
    ),
    partial_update=extend_schema(
        summary="Partial update apartment",
        responses={
            200: ApartmentSerializer,
            400: OpenApiResponse(description="Validation error"),
            403: OpenApiResponse(description="Admin access required"),
            404: OpenApiResponse(description="Apartment not found"),
        },
    ),
    destroy=extend_schema(
        summary="Delete apartment",
        description="Delete an apartment (admin only). `?cleanup=true` also deletes its image files.",
        parameters=[
            OpenApiParameter("cleanup", OpenApiTypes.BOOL, description="Delete image files too"),
        ],
        responses={
            200: OpenApiResponse(description="Apartment deleted"),
            403: OpenApiResponse(description="Admin access required"),
            404: OpenApiResponse(description="Apartment not found"),
        },
    ),
)
class ApartmentViewSet(viewsets.ModelViewSet):
    """
    Apartment catalog. Reads are public, writes are admin only.
    Booked dates are read only here; they change through bookings.
    """
    serializer_class = ApartmentSerializer
    permission_classes = (IsAdminOrReadOnly,)
    parser_classes = (JSONParser, MultiPartParser, FormParser)
    pagination_class = None
    filter_backends = ()

    def get_queryset(self):
        return (Apartment.objects.select_related('category')
                .prefetch_related('images', 'booked_dates')
                .order_by('-created_at', '-pk'))

    def get_throttles(self):
        if self.action in ('create', 'images'):
            return [MediaUploadThrottle()]
        return super().get_throttles()

    # -------------------------
    # Image helpers
    # -------------------------
    def _collect_images(self, request, existing=0):
        """Validate uploaded `mainImage` / `images` parts before anything is written."""
        main_image = request.FILES.get('mainImage')
        images = request.FILES.getlist('images')

        max_total = int(getattr(settings, 'APARTMENT_IMAGES_MAX_PER_APARTMENT', 10))
        incoming = len(images) + (1 if main_image else 0)
        if existing + incoming > max_total:
            raise ValidationError({"images": f"Too many images: max {max_total} per apartment."})

        for uploaded in ([main_image] if main_image else []) + images:
            try:
                validate_image_file(uploaded)
            except DjangoValidationError as e:
                raise ValidationError({"images": e.messages})
        return main_image, images

    def _store_images(self, apartment, main_image, images):
        if main_image:
            for old in apartment.images.filter(is_main=True):
                delete_image_file(old.image)
                old.delete()
            ApartmentImage.objects.create(apartment=apartment, image=main_image, is_main=True)
        for uploaded in images:
            ApartmentImage.objects.create(apartment=apartment, image=uploaded)

    # -------------------------
    # CRUD
    # -------------------------
    def create(self, request, *args, **kwargs):
        main_image, images = self._collect_images(request)
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            apartment = serializer.save()
            self._store_images(apartment, main_image, images)
        logger.info("apartment %s created with %s image(s)", apartment.pk,
                    len(images) + (1 if main_image else 0))
        apartment = self.get_queryset().get(pk=apartment.pk)
        return Response(self.get_serializer(apartment).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        apartment = self.get_object()
        existing = apartment.images.exclude(is_main=True).count()
        main_image, images = self._collect_images(request, existing=existing)
        serializer = self.get_serializer(apartment, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            apartment = serializer.save()
            self._store_images(apartment, main_image, images)
        apartment = self.get_queryset().get(pk=apartment.pk)
        return Response(self.get_serializer(apartment).data)

    def destroy(self, request, *args, **kwargs):
        apartment = self.get_object()
        cleanup = str(request.query_params.get('cleanup', '')).lower() == 'true'
        data = self.get_serializer(apartment).data
        files = [img.image for img in apartment.images.all()]

        apartment.delete()
        if cleanup:
            for file_field in files:
                delete_image_file(file_field)

        logger.info("apartment %s deleted (cleanup=%s)", data["id"], cleanup)
        return Response({
            "message": "Apartment deleted successfully",
            "cleanup": "Images deleted" if cleanup else "Images preserved",
            "apartment": data,
        })

    # -------------------------
    # Extra actions
    # -------------------------
    @extend_schema(
        summary="Upload apartment images",
        description="Add images to an apartment (admin only). `mainImage` replaces the current main image.",
        request=ApartmentImageUploadSerializer,
        responses={
            201: ApartmentImageSerializer(many=True),
            400: OpenApiResponse(description="Invalid or too many images"),
            403: OpenApiResponse(description="Admin access required"),
        },
    )
    @action(detail=True, methods=['post'], parser_classes=[MultiPartParser, FormParser])
    def images(self, request, pk=None):
        apartment = self.get_object()
        existing = apartment.images.exclude(is_main=True).count()
        main_image, images = self._collect_images(request, existing=existing)
        if not main_image and not images:
            raise ValidationError({"images": "At least one image is required."})
        with transaction.atomic():
            self._store_images(apartment, main_image, images)
        data = ApartmentImageSerializer(
            apartment.images.all(), many=True, context=self.get_serializer_context()
        ).data
        return Response(data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Apartment availability",
        description="Booked ranges of an apartment ([start, end), checkout day free). "
                    "With `checkIn` and `checkOut` the response also says whether that stay is free.",
        parameters=[
            OpenApiParameter("checkIn", OpenApiTypes.DATE, description="Stay start (YYYY-MM-DD)"),
            OpenApiParameter("checkOut", OpenApiTypes.DATE, description="Stay end (YYYY-MM-DD)"),
        ],
        responses={
            200: OpenApiResponse(
                description="Availability",
                examples=[
                    OpenApiExample(
                        "Example response",
                        value={
                            "apartment": 1,
                            "isAvailable": True,
                            "bookedDates": [{"start": "2024-02-01", "end": "2024-02-05"}],
                            "free": False,
                        },
                    )
                ],
            ),
            400: OpenApiResponse(description="Invalid dates"),
            404: OpenApiResponse(description="Apartment not found"),
        },
    )
    @action(detail=True, methods=['get'], permission_classes=[permissions.AllowAny])
    def availability(self, request, pk=None):
        apartment = self.get_object()
        booked = list(apartment.booked_dates.all())
        data = {
            "apartment": apartment.pk,
            "isAvailable": apartment.is_available,
            "bookedDates": BookedRangeSerializer(booked, many=True).data,
        }

        raw_in = request.query_params.get('checkIn')
        raw_out = request.query_params.get('checkOut')
        if raw_in or raw_out:
            start, end = normalize_date(raw_in), normalize_date(raw_out)
            if start is None or end is None or end <= start:
                return Response(
                    {"error": "InvalidDateRange", "detail": "Check-out date must be after check-in date."},
                    status=status.HTTP_400_BAD_REQUEST,
                )
            stay = DateRange(start, end)
            data["free"] = apartment.is_available and not any(
                DateRange(r.start, r.end).overlaps(stay) for r in booked
            )
        return Response(data)
