from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from src.apartments.models import Category


class CategorySerializer(serializers.ModelSerializer):
    name = serializers.CharField(
        min_length=2,
        max_length=50,
        validators=[UniqueValidator(Category.objects.all(), message="Category name already exists", lookup="iexact")],
    )
    description = serializers.CharField(max_length=200, required=False, allow_blank=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Category
        fields = ("id", "name", "description", "createdAt", "updatedAt")
