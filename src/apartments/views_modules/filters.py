from datetime import timedelta

from django.db.models import Q, Exists, OuterRef
from django_filters import rest_framework as df
from django.utils.dateparse import parse_date

from ..models import Apartment, Booking, Category


class ApartmentSearchFilter(df.FilterSet):
    query = df.CharFilter(method='filter_query', label='Title or description (contains)')
    location = df.CharFilter(field_name='location', lookup_expr='icontains', label='Location (contains)')
    category = df.CharFilter(method='filter_category', label='Category id or name')
    minPrice = df.NumberFilter(field_name='price', lookup_expr='gte', label='Price min')
    maxPrice = df.NumberFilter(field_name='price', lookup_expr='lte', label='Price max')
    bedrooms = df.NumberFilter(field_name='bedrooms', label='Bedrooms')
    bathrooms = df.NumberFilter(field_name='bathrooms', label='Bathrooms')
    minCapacity = df.NumberFilter(field_name='capacity', lookup_expr='gte', label='Capacity min')
    maxCapacity = df.NumberFilter(field_name='capacity', lookup_expr='lte', label='Capacity max')
    isAvailable = df.BooleanFilter(field_name='is_available', label='Available flag')
    amenities = df.CharFilter(method='filter_amenities', label='Required amenities')
    checkIn = df.DateFilter(method='filter_free', label='Free from (YYYY-MM-DD)')
    checkOut = df.DateFilter(method='filter_free', label='Free until (YYYY-MM-DD)')

    class Meta:
        model = Apartment
        fields = [
            'query', 'location', 'category',
            'minPrice', 'maxPrice', 'bedrooms', 'bathrooms',
            'minCapacity', 'maxCapacity', 'isAvailable',
            'amenities', 'checkIn', 'checkOut',
        ]

    def filter_query(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(Q(title__icontains=value) | Q(description__icontains=value))

    def filter_category(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        if value.isdigit():
            return queryset.filter(category_id=int(value))
        category = Category.objects.filter(name__icontains=value).order_by('name').first()
        if category is None:
            return queryset.none()
        return queryset.filter(category=category)

    def filter_amenities(self, queryset, name, value):
        """
        Every requested amenity must be present (case-insensitive). Matched
        in Python because JSON containment lookups are not portable to SQLite.
        """
        wanted = self._requested_amenities()
        if not wanted:
            return queryset
        matching = [
            pk for pk, amenities in queryset.values_list('pk', 'amenities')
            if wanted <= {str(a).strip().lower() for a in (amenities or [])}
        ]
        return queryset.filter(pk__in=matching)

    def _requested_amenities(self):
        req = getattr(self, 'request', None)
        if req is None:
            return set()
        wanted = set()
        for raw in req.query_params.getlist('amenities'):
            wanted.update(part.strip().lower() for part in raw.split(',') if part.strip())
        return wanted

    def _stay_window(self):
        """
        Both params parsed to dates. A single date means that one night:
        checkIn=d gives [d, d+1), checkOut=d gives [d-1, d).
        """
        req = getattr(self, 'request', None)
        if not req:
            return None, None
        s = req.query_params.get('checkIn') or None
        e = req.query_params.get('checkOut') or None
        start = parse_date(s) if s else None
        end = parse_date(e) if e else None
        if start and not end:
            end = start + timedelta(days=1)
        if end and not start:
            start = end - timedelta(days=1)
        return start, end

    def filter_free(self, queryset, name, value):
        """Drop apartments with a non-cancelled booking overlapping [start, end)."""
        # method is bound to two fields
        if getattr(self, '_free_applied', False):
            return queryset

        start, end = self._stay_window()
        if not start or not end or end <= start:
            return queryset

        conflict = Booking.objects.filter(
            apartment=OuterRef('pk'),
            check_in__lt=end,
            check_out__gt=start,
        ).exclude(status=Booking.CANCELLED)
        self._free_applied = True
        return queryset.exclude(Exists(conflict))


class BookingSearchFilter(df.FilterSet):
    query = df.CharFilter(field_name='guest_name', lookup_expr='icontains', label='Guest name (contains)')
    guestName = df.CharFilter(field_name='guest_name', lookup_expr='icontains', label='Guest name (contains)')
    guestEmail = df.CharFilter(field_name='guest_email', lookup_expr='icontains', label='Guest email (contains)')
    status = df.ChoiceFilter(field_name='status', choices=Booking.STATUS_CHOICES)
    apartment = df.NumberFilter(field_name='apartment_id', label='Apartment id')
    checkIn = df.DateFilter(field_name='check_in', lookup_expr='gte', label='Check-in on or after')
    checkOut = df.DateFilter(field_name='check_out', lookup_expr='lte', label='Check-out on or before')

    class Meta:
        model = Booking
        fields = ['query', 'guestName', 'guestEmail', 'status', 'apartment', 'checkIn', 'checkOut']


class BookingListFilter(df.FilterSet):
    """Admin filters on GET /bookings."""
    status = df.ChoiceFilter(field_name='status', choices=Booking.STATUS_CHOICES)
    apartment = df.NumberFilter(field_name='apartment_id', label='Apartment id')

    class Meta:
        model = Booking
        fields = ['status', 'apartment']
