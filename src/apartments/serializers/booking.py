from rest_framework import serializers
from drf_spectacular.utils import extend_schema_field

from src.apartments.models import Booking
from src.apartments.services import BookingRequest
from .common import ApartmentSummarySerializer


class BookingRequestSerializer(serializers.Serializer):
    """
    Typed shape of POST /bookings. Only checks the wire types; business
    rules (dates, capacity, overlap, guest info) belong to the admission
    engine so that every rejection carries its own error kind.
    `checkInDate`/`checkOutDate` are accepted as aliases.
    """
    apartment = serializers.IntegerField(
        error_messages={"invalid": "Invalid apartment ID"},
    )
    checkIn = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    checkInDate = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    checkOut = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    checkOutDate = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    guests = serializers.IntegerField()
    guestName = serializers.CharField(required=False, allow_blank=True, max_length=100)
    guestEmail = serializers.CharField(required=False, allow_blank=True, max_length=254)
    guestPhone = serializers.CharField(required=False, allow_blank=True, max_length=30)
    totalPrice = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0,
        required=False, allow_null=True,
    )

    def validate(self, attrs):
        unknown = sorted(set(self.initial_data) - set(self.fields))
        if unknown:
            raise serializers.ValidationError(
                {"non_field_errors": [f"Unknown field(s): {', '.join(unknown)}"]}
            )
        return attrs

    def to_request(self, user=None) -> BookingRequest:
        data = self.validated_data
        user_id = user.pk if user is not None and user.is_authenticated else None
        return BookingRequest(
            apartment_id=data["apartment"],
            check_in=data.get("checkIn") or data.get("checkInDate"),
            check_out=data.get("checkOut") or data.get("checkOutDate"),
            guests=data["guests"],
            guest_name=data.get("guestName") or "",
            guest_email=data.get("guestEmail") or "",
            guest_phone=data.get("guestPhone") or "",
            total_price=data.get("totalPrice"),
            user_id=user_id,
        )


class BookingSerializer(serializers.ModelSerializer):
    """Read shape of a booking with its apartment summary attached."""
    apartment = serializers.SerializerMethodField()
    checkIn = serializers.DateField(source="check_in", read_only=True)
    checkOut = serializers.DateField(source="check_out", read_only=True)
    numberOfNights = serializers.IntegerField(source="number_of_nights", read_only=True)
    totalPrice = serializers.DecimalField(source="total_price", max_digits=12, decimal_places=2, read_only=True)
    guestName = serializers.CharField(source="guest_name", read_only=True)
    guestEmail = serializers.CharField(source="guest_email", read_only=True)
    guestPhone = serializers.CharField(source="guest_phone", read_only=True)
    user = serializers.IntegerField(source="user_id", read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Booking
        fields = (
            "id", "apartment",
            "checkIn", "checkOut", "guests", "numberOfNights", "totalPrice",
            "guestName", "guestEmail", "guestPhone", "user",
            "status", "createdAt", "updatedAt",
        )
        read_only_fields = fields

    @extend_schema_field(ApartmentSummarySerializer)
    def get_apartment(self, obj):
        apartment = getattr(obj, "apartment", None)
        if apartment is None:
            return None
        return ApartmentSummarySerializer(apartment).data


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Booking.STATUS_CHOICES)

    def validate(self, attrs):
        extra = sorted(set(self.initial_data) - {"status"})
        if extra:
            raise serializers.ValidationError(
                {"non_field_errors": [f"Only status can be changed, got: {', '.join(extra)}"]}
            )
        return attrs
