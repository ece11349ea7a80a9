import logging

from django.db import DatabaseError
from rest_framework import viewsets, permissions, status
from rest_framework.response import Response
from drf_spectacular.utils import (
    extend_schema_view, extend_schema, OpenApiParameter, OpenApiTypes,
    OpenApiExample, OpenApiResponse
)

from ..models import Booking
from ..permissions import IsAdmin, is_admin
from ..serializers import BookingRequestSerializer, BookingSerializer, BookingStatusSerializer
from ..services import AdmissionError, NotFound, build_admission_engine
from ..throttling import BookingCreateThrottle, BookingMutationThrottle
from .filters import BookingListFilter

logger = logging.getLogger(__name__)


def first_error(errors):
    """Pull one readable message out of a DRF error structure."""
    if isinstance(errors, dict):
        for field, value in errors.items():
            message = first_error(value)
            if field in ("non_field_errors", "detail"):
                return message
            return f"{field}: {message}"
        return "Invalid request."
    if isinstance(errors, (list, tuple)):
        return first_error(errors[0]) if errors else "Invalid request."
    return str(errors)


def error_response(kind, detail, status_code=status.HTTP_400_BAD_REQUEST, **extra):
    return Response({"error": kind, "detail": detail, **extra}, status=status_code)


def admission_error_response(exc: AdmissionError, not_found_status=status.HTTP_400_BAD_REQUEST):
    code = not_found_status if isinstance(exc, NotFound) else status.HTTP_400_BAD_REQUEST
    return error_response(exc.kind, exc.message, code)


ERROR_EXAMPLE = OpenApiExample(
    "Date conflict",
    value={"error": "DateConflict", "detail": "Apartment is already booked for the selected dates."},
    response_only=True,
    status_codes=["400"],
)


@extend_schema_view(
    list=extend_schema(
        summary="List bookings",
        description="Admins get every booking. Everyone else must look bookings up by guest "
                    "`email` or `phone`, or pass `mine=true` when signed in; otherwise the list is empty.",
        parameters=[
            OpenApiParameter("email", OpenApiTypes.EMAIL, description="Guest email"),
            OpenApiParameter("phone", OpenApiTypes.STR, description="Guest phone"),
            OpenApiParameter("mine", OpenApiTypes.BOOL, description="Bookings of the signed-in user"),
            OpenApiParameter("status", OpenApiTypes.STR, description="Filter by status (admin)"),
            OpenApiParameter("apartment", OpenApiTypes.INT, description="Filter by apartment (admin)"),
        ],
        responses={200: BookingSerializer(many=True)},
    ),
    create=extend_schema(
        summary="Create booking",
        description="Book an apartment. The range is half-open: the check-out day stays free "
                    "for the next guest.",
        request=BookingRequestSerializer,
        responses={
            201: BookingSerializer,
            400: OpenApiResponse(description="Rejected booking (`error` holds the kind)"),
            500: OpenApiResponse(description="Store failure"),
        },
        examples=[ERROR_EXAMPLE],
    ),
    retrieve=extend_schema(
        summary="Get booking",
        responses={200: BookingSerializer, 404: OpenApiResponse(description="Booking not found")},
    ),
    update=extend_schema(
        summary="Change booking status",
        description="Admin only. Only `status` can change; cancelling frees the dates.",
        request=BookingStatusSerializer,
        responses={
            200: BookingSerializer,
            400: OpenApiResponse(description="Invalid status or dates taken"),
            403: OpenApiResponse(description="Admin access required"),
            404: OpenApiResponse(description="Booking not found"),
        },
    ),
    partial_update=extend_schema(
        summary="Change booking status",
        request=BookingStatusSerializer,
        responses={
            200: BookingSerializer,
            400: OpenApiResponse(description="Invalid status or dates taken"),
            403: OpenApiResponse(description="Admin access required"),
            404: OpenApiResponse(description="Booking not found"),
        },
    ),
    destroy=extend_schema(
        summary="Delete booking",
        description="Admin only. Frees the booked dates.",
        responses={
            200: OpenApiResponse(description="Booking deleted"),
            403: OpenApiResponse(description="Admin access required"),
            404: OpenApiResponse(description="Booking not found"),
        },
    ),
)
class BookingViewSet(viewsets.ModelViewSet):
    """
    Bookings. Creation and status changes go through the admission engine,
    which owns the apartment's booked dates.
    """
    serializer_class = BookingSerializer
    filterset_class = BookingListFilter
    pagination_class = None

    def get_permissions(self):
        if self.action in ('create', 'list', 'retrieve'):
            return [permissions.AllowAny()]
        return [IsAdmin()]

    def get_throttles(self):
        if self.action == 'create':
            return [BookingCreateThrottle()]
        if self.action in ('update', 'partial_update', 'destroy'):
            return [BookingMutationThrottle()]
        return super().get_throttles()

    def get_admission_engine(self):
        return build_admission_engine()

    def get_queryset(self):
        queryset = Booking.objects.select_related('apartment')
        if getattr(self, 'swagger_fake_view', False):
            return queryset.none()

        request = self.request
        if is_admin(request.user):
            return queryset

        email = (request.query_params.get('email') or '').strip()
        phone = (request.query_params.get('phone') or '').strip()
        mine = str(request.query_params.get('mine', '')).lower() == 'true'
        if email:
            return queryset.filter(guest_email=email.lower())
        if phone:
            return queryset.filter(guest_phone=phone)
        if mine and request.user.is_authenticated:
            return queryset.filter(user=request.user)
        return queryset.none()

    def _find(self, pk):
        return self.get_admission_engine().ledger.get(pk)

    def create(self, request, *args, **kwargs):
        serializer = BookingRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response("ValidationError", first_error(serializer.errors), fields=serializer.errors)

        engine = self.get_admission_engine()
        try:
            booking = engine.admit(serializer.to_request(request.user))
        except AdmissionError as exc:
            return admission_error_response(exc)
        except DatabaseError:
            logger.exception("booking store failure for apartment %s", serializer.validated_data.get("apartment"))
            return error_response("InternalError", "Failed to create booking",
                                  status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, *args, **kwargs):
        booking = self._find(kwargs.get('pk'))
        if booking is None:
            return error_response("NotFound", "Booking not found", status.HTTP_404_NOT_FOUND)
        return Response(BookingSerializer(booking).data)

    def update(self, request, *args, **kwargs):
        serializer = BookingStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response("ValidationError", first_error(serializer.errors), fields=serializer.errors)

        engine = self.get_admission_engine()
        try:
            booking = engine.change_status(kwargs.get('pk'), serializer.validated_data['status'])
        except AdmissionError as exc:
            return admission_error_response(exc, not_found_status=status.HTTP_404_NOT_FOUND)
        except DatabaseError:
            logger.exception("booking %s status update failed", kwargs.get('pk'))
            return error_response("InternalError", "Failed to update booking",
                                  status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(BookingSerializer(booking).data)

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        booking = self._find(kwargs.get('pk'))
        if booking is None:
            return error_response("NotFound", "Booking not found", status.HTTP_404_NOT_FOUND)
        data = BookingSerializer(booking).data

        try:
            self.get_admission_engine().remove(booking.pk)
        except AdmissionError as exc:
            return admission_error_response(exc, not_found_status=status.HTTP_404_NOT_FOUND)
        except DatabaseError:
            logger.exception("booking %s delete failed", booking.pk)
            return error_response("InternalError", "Failed to delete booking",
                                  status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response({"message": "Booking deleted successfully", "booking": data})
