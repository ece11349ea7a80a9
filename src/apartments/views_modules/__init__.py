from .apartment import ApartmentViewSet
from .category import CategoryViewSet
from .booking import BookingViewSet
from .search import ApartmentSearchView, CategorySearchView, BookingSearchView
from .media import MediaUploadView, MediaMultipleUploadView, MediaFileListView, MediaFileView
from .health import HealthView
from .filters import ApartmentSearchFilter, BookingSearchFilter, BookingListFilter

__all__ = [
    "ApartmentViewSet",
    "CategoryViewSet",
    "BookingViewSet",
    "ApartmentSearchView",
    "CategorySearchView",
    "BookingSearchView",
    "MediaUploadView",
    "MediaMultipleUploadView",
    "MediaFileListView",
    "MediaFileView",
    "HealthView",
    "ApartmentSearchFilter",
    "BookingSearchFilter",
    "BookingListFilter",
]
