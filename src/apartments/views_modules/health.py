from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema


class HealthView(APIView):
    """Root endpoint: service status and an index of the API."""
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @extend_schema(exclude=True)
    def get(self, request):
        return Response({
            "message": "Apartment booking API is running",
            "endpoints": {
                "apartments": "/api/apartments/",
                "categories": "/api/categories/",
                "bookings": "/api/bookings/",
                "search": "/api/search/",
                "media": "/api/media/",
                "auth": "/api/auth/",
                "docs": "/api/docs/",
            },
        })
