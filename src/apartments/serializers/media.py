from rest_framework import serializers


class MediaFileSerializer(serializers.Serializer):
    """Stored upload as listed by the media endpoints."""
    filename = serializers.CharField()
    originalName = serializers.CharField(required=False)
    path = serializers.CharField()
    url = serializers.CharField()
    size = serializers.IntegerField()
    mimetype = serializers.CharField(required=False)
    uploadedAt = serializers.DateTimeField(required=False, allow_null=True)


class MediaUploadSerializer(serializers.Serializer):
    image = serializers.ImageField()


class MediaMultipleUploadSerializer(serializers.Serializer):
    images = serializers.ListField(child=serializers.ImageField(), allow_empty=False)
