from drf_spectacular.utils import extend_schema_field, OpenApiTypes
from rest_framework import serializers

from src.apartments.models import Apartment, ApartmentImage, Category
from .common import StringListField, CategoryTinySerializer, BookedRangeSerializer


def _file_url(field_file, request):
    try:
        rel = field_file.url
    except ValueError:
        return ""
    return request.build_absolute_uri(rel) if request else rel


class ApartmentImageSerializer(serializers.ModelSerializer):
    url = serializers.SerializerMethodField()
    path = serializers.SerializerMethodField()
    isMain = serializers.BooleanField(source="is_main", read_only=True)

    class Meta:
        model = ApartmentImage
        fields = ["id", "url", "path", "isMain"]

    @extend_schema_field(OpenApiTypes.STR)
    def get_url(self, obj):
        return _file_url(obj.image, self.context.get("request"))

    @extend_schema_field(OpenApiTypes.STR)
    def get_path(self, obj):
        return _file_url(obj.image, None)


class ApartmentSerializer(serializers.ModelSerializer):
    category = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(),
        error_messages={
            "does_not_exist": "Invalid category ID",
            "incorrect_type": "Invalid category ID",
        },
    )
    amenities = StringListField(required=False)
    features = StringListField(required=False)
    isAvailable = serializers.BooleanField(source="is_available", required=False)
    mainImage = serializers.SerializerMethodField()
    images = ApartmentImageSerializer(many=True, read_only=True)
    bookedDates = BookedRangeSerializer(source="booked_dates", many=True, read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Apartment
        fields = [
            "id", "title", "location", "description",
            "price", "bedrooms", "bathrooms", "capacity",
            "category", "amenities", "features", "isAvailable",
            "mainImage", "images", "bookedDates",
            "createdAt", "updatedAt",
        ]
        extra_kwargs = {
            "title": {"min_length": 5, "max_length": 100},
            "location": {"min_length": 5},
            "description": {"max_length": 1000, "required": False, "allow_blank": True},
        }

    @extend_schema_field(OpenApiTypes.STR)
    def get_mainImage(self, obj):
        image = obj.main_image
        if image is None:
            return None
        return _file_url(image.image, self.context.get("request"))

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data["category"] = CategoryTinySerializer(instance.category).data if instance.category_id else None
        return data

    def validate_price(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("Price cannot be negative.")
        return value

    def validate_capacity(self, value):
        if value is not None and value < 1:
            raise serializers.ValidationError("Capacity must be at least 1.")
        return value


class ApartmentImageUploadSerializer(serializers.Serializer):
    """
    Documents the multipart shape of image uploads; the view reads
    request.FILES directly so repeated `images` parts are all kept.
    """
    mainImage = serializers.ImageField(required=False)
    images = serializers.ListField(child=serializers.ImageField(), required=False, allow_empty=True)
