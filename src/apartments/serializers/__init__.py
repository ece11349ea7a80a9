from .common import (
    StringListField, CategoryTinySerializer, ApartmentSummarySerializer, BookedRangeSerializer,
)
from .category import CategorySerializer
from .apartment import ApartmentSerializer, ApartmentImageSerializer, ApartmentImageUploadSerializer
from .booking import BookingRequestSerializer, BookingSerializer, BookingStatusSerializer
from .media import MediaFileSerializer, MediaUploadSerializer, MediaMultipleUploadSerializer

__all__ = [
    "StringListField",
    "CategoryTinySerializer",
    "ApartmentSummarySerializer",
    "BookedRangeSerializer",
    "CategorySerializer",
    "ApartmentSerializer",
    "ApartmentImageSerializer",
    "ApartmentImageUploadSerializer",
    "BookingRequestSerializer",
    "BookingSerializer",
    "BookingStatusSerializer",
    "MediaFileSerializer",
    "MediaUploadSerializer",
    "MediaMultipleUploadSerializer",
]
