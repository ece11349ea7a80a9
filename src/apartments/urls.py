from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views_modules import (
    ApartmentViewSet, CategoryViewSet, BookingViewSet,
    ApartmentSearchView, CategorySearchView, BookingSearchView,
    MediaUploadView, MediaMultipleUploadView, MediaFileListView, MediaFileView,
)

app_name = "apartments"

router = DefaultRouter()
router.register(r"apartments", ApartmentViewSet, basename="apartment")
router.register(r"categories", CategoryViewSet, basename="category")
router.register(r"bookings", BookingViewSet, basename="booking")

urlpatterns = [
    path("", include(router.urls)),
    path("search/", ApartmentSearchView.as_view(), name="search"),
    path("search/categories/", CategorySearchView.as_view(), name="search-categories"),
    path("search/bookings/", BookingSearchView.as_view(), name="search-bookings"),
    path("media/upload/", MediaUploadView.as_view(), name="media-upload"),
    path("media/upload-multiple/", MediaMultipleUploadView.as_view(), name="media-upload-multiple"),
    path("media/files/", MediaFileListView.as_view(), name="media-files"),
    path("media/<str:filename>/", MediaFileView.as_view(), name="media-file"),
]
