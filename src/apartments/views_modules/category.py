import logging

from django.db.models import ProtectedError
from rest_framework import viewsets, status
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema_view, extend_schema, OpenApiResponse

from ..models import Category
from ..permissions import IsAdminOrReadOnly
from ..serializers import CategorySerializer

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(summary="List categories", responses={200: CategorySerializer(many=True)}),
    create=extend_schema(
        summary="Create category",
        description="Create a category (admin only). Names are unique, case-insensitively.",
        responses={
            201: CategorySerializer,
            400: OpenApiResponse(description="Validation error or duplicate name"),
            403: OpenApiResponse(description="Admin access required"),
        },
    ),
    retrieve=extend_schema(
        summary="Get category",
        responses={200: CategorySerializer, 404: OpenApiResponse(description="Category not found")},
    ),
    update=extend_schema(summary="Update category"),
    partial_update=extend_schema(summary="Partial update category"),
    destroy=extend_schema(
        summary="Delete category",
        description="Delete a category (admin only). Categories still used by apartments cannot be deleted.",
        responses={
            200: OpenApiResponse(description="Category deleted"),
            400: OpenApiResponse(description="Category in use"),
            404: OpenApiResponse(description="Category not found"),
        },
    ),
)
class CategoryViewSet(viewsets.ModelViewSet):
    queryset = Category.objects.all()
    serializer_class = CategorySerializer
    permission_classes = (IsAdminOrReadOnly,)
    pagination_class = None
    filter_backends = ()

    def destroy(self, request, *args, **kwargs):
        category = self.get_object()
        data = self.get_serializer(category).data
        try:
            category.delete()
        except ProtectedError:
            logger.info("category %s not deleted: still referenced by apartments", category.pk)
            return Response(
                {"error": "ValidationError", "detail": "Category is used by one or more apartments."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return Response({"message": "Category deleted successfully", "category": data})
