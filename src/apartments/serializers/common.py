from rest_framework import serializers


class StringListField(serializers.ListField):
    """
    List of strings that also accepts a comma-separated string
    ("wifi, parking") as sent by plain HTML forms.
    """
    child = serializers.CharField(max_length=100)

    def to_internal_value(self, data):
        if isinstance(data, str):
            data = [data]
        if isinstance(data, (list, tuple)):
            items = []
            for item in data:
                if isinstance(item, str):
                    items.extend(part.strip() for part in item.split(',') if part.strip())
                else:
                    items.append(item)
            data = items
        return super().to_internal_value(data)


class CategoryTinySerializer(serializers.Serializer):
    """Nested category reference on apartment cards."""
    id = serializers.IntegerField()
    name = serializers.CharField()
    description = serializers.CharField(allow_blank=True)


class ApartmentSummarySerializer(serializers.Serializer):
    """Apartment projection attached to bookings."""
    id = serializers.IntegerField()
    title = serializers.CharField()
    location = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)


class BookedRangeSerializer(serializers.Serializer):
    start = serializers.DateField()
    end = serializers.DateField()
