import logging

from django.db.models import Q
from django_filters import rest_framework as df
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import (
    extend_schema, OpenApiParameter, OpenApiTypes,
    OpenApiExample, OpenApiResponse
)

from ..models import Apartment, Booking, Category
from ..pagination import SearchPagination
from ..permissions import IsAdmin
from ..serializers import ApartmentSerializer, BookingSerializer, CategorySerializer
from ..throttling import SearchThrottle
from .filters import ApartmentSearchFilter, BookingSearchFilter

logger = logging.getLogger(__name__)

# sortBy value -> model field
SORT_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "price": "price",
    "title": "title",
    "location": "location",
    "capacity": "capacity",
    "bedrooms": "bedrooms",
    "bathrooms": "bathrooms",
}


@extend_schema(
    summary="Search apartments",
    description="Filter the catalog. `amenities` may repeat; every listed amenity must be present. "
                "`checkIn`/`checkOut` drop apartments with an overlapping active booking.",
    parameters=[
        OpenApiParameter("sortBy", OpenApiTypes.STR, enum=list(SORT_FIELDS), description="Sort field"),
        OpenApiParameter("sortOrder", OpenApiTypes.STR, enum=["asc", "desc"], description="Sort direction"),
        OpenApiParameter("page", OpenApiTypes.INT, description="Page number (from 1)"),
        OpenApiParameter("limit", OpenApiTypes.INT, description="Page size"),
    ],
    responses={
        200: ApartmentSerializer(many=True),
        400: OpenApiResponse(description="Invalid filter parameters"),
    },
)
class ApartmentSearchView(generics.ListAPIView):
    serializer_class = ApartmentSerializer
    permission_classes = [permissions.AllowAny]
    pagination_class = SearchPagination
    filter_backends = (df.DjangoFilterBackend,)
    filterset_class = ApartmentSearchFilter
    throttle_classes = [SearchThrottle]

    def get_queryset(self):
        queryset = Apartment.objects.select_related('category').prefetch_related('images', 'booked_dates')
        return queryset.order_by(*self._ordering())

    def _ordering(self):
        params = self.request.query_params
        field = SORT_FIELDS.get(params.get('sortBy') or '')
        if field is None:
            return ['-created_at', '-pk']
        prefix = '-' if (params.get('sortOrder') or '').lower() == 'desc' else ''
        return [f'{prefix}{field}', '-pk']


@extend_schema(
    summary="Search categories",
    parameters=[OpenApiParameter("query", OpenApiTypes.STR, description="Name or description (contains)")],
    responses={
        200: OpenApiResponse(
            description="Matching categories",
            examples=[
                OpenApiExample(
                    "Example response",
                    value={"count": 1, "categories": [{"id": 1, "name": "Studio", "description": "One room"}]},
                )
            ],
        ),
    },
)
class CategorySearchView(APIView):
    permission_classes = [permissions.AllowAny]
    throttle_classes = [SearchThrottle]

    def get(self, request):
        queryset = Category.objects.order_by('name')
        query = (request.query_params.get('query') or '').strip()
        if query:
            queryset = queryset.filter(Q(name__icontains=query) | Q(description__icontains=query))
        data = CategorySerializer(queryset, many=True).data
        return Response({"count": len(data), "categories": data})


@extend_schema(
    summary="Search bookings",
    description="Admin only.",
    parameters=[
        OpenApiParameter("query", OpenApiTypes.STR, description="Guest name (contains)"),
        OpenApiParameter("guestName", OpenApiTypes.STR, description="Guest name (contains)"),
        OpenApiParameter("guestEmail", OpenApiTypes.STR, description="Guest email (contains)"),
        OpenApiParameter("status", OpenApiTypes.STR, description="Exact status"),
        OpenApiParameter("apartment", OpenApiTypes.INT, description="Apartment id"),
        OpenApiParameter("checkIn", OpenApiTypes.DATE, description="Check-in on or after"),
        OpenApiParameter("checkOut", OpenApiTypes.DATE, description="Check-out on or before"),
    ],
    responses={
        200: OpenApiResponse(description="{count, bookings}"),
        400: OpenApiResponse(description="Invalid filter parameters"),
        403: OpenApiResponse(description="Admin access required"),
    },
)
class BookingSearchView(APIView):
    permission_classes = [IsAdmin]
    throttle_classes = [SearchThrottle]

    def get(self, request):
        filterset = BookingSearchFilter(
            request.query_params,
            queryset=Booking.objects.select_related('apartment').order_by('-created_at'),
            request=request,
        )
        if not filterset.is_valid():
            return Response(
                {"error": "ValidationError", "detail": "Invalid search parameters.", "fields": filterset.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )
        data = BookingSerializer(filterset.qs, many=True).data
        return Response({"count": len(data), "bookings": data})
