"""
Storage seams used by the admission engine.

The engine only talks to an ApartmentCatalog and a BookingLedger; the
Django implementations below are the production ones, tests can pass
in-memory doubles instead.
"""
from __future__ import annotations

from typing import ContextManager, List, Optional, Protocol

from django.db import transaction

from ..models import Apartment, BookedDateRange, Booking
from .dates import DateRange


class ApartmentCatalog(Protocol):
    def atomic(self) -> ContextManager: ...

    def find_by_id(self, apartment_id, for_update: bool = False): ...

    def booked_ranges(self, apartment) -> List[DateRange]: ...

    def reserve(self, apartment, date_range: DateRange, booking) -> None: ...

    def release(self, booking) -> None: ...


class BookingLedger(Protocol):
    def find_overlapping(self, apartment_id, start, end, exclude_status=Booking.CANCELLED,
                         exclude_booking_id=None) -> list: ...

    def create(self, **fields): ...

    def get(self, booking_id, for_update: bool = False): ...

    def update_status(self, booking, status: str): ...

    def delete(self, booking) -> None: ...


class DjangoApartmentCatalog:
    """Apartments and their booked ranges in the Django database."""

    def atomic(self):
        return transaction.atomic()

    def find_by_id(self, apartment_id, for_update=False) -> Optional[Apartment]:
        qs = Apartment.objects.all()
        if for_update:
            # row lock on backends that support it; SQLite ignores it
            qs = qs.select_for_update()
        try:
            return qs.get(pk=apartment_id)
        except (Apartment.DoesNotExist, ValueError, TypeError):
            return None

    def booked_ranges(self, apartment):
        rows = BookedDateRange.objects.filter(apartment=apartment).values_list('start', 'end')
        return [DateRange(start, end) for start, end in rows]

    def reserve(self, apartment, date_range, booking):
        BookedDateRange.objects.create(
            apartment=apartment,
            booking=booking,
            start=date_range.start,
            end=date_range.end,
        )
        apartment.save(update_fields=['updated_at'])

    def release(self, booking):
        BookedDateRange.objects.filter(booking_id=booking.pk).delete()


class DjangoBookingLedger:
    """Booking rows in the Django database."""

    def find_overlapping(self, apartment_id, start, end, exclude_status=Booking.CANCELLED,
                         exclude_booking_id=None):
        qs = Booking.objects.filter(
            apartment_id=apartment_id,
            check_in__lt=end,
            check_out__gt=start,
        )
        if exclude_status:
            qs = qs.exclude(status=exclude_status)
        if exclude_booking_id is not None:
            qs = qs.exclude(pk=exclude_booking_id)
        return list(qs)

    def create(self, **fields):
        return Booking.objects.create(**fields)

    def get(self, booking_id, for_update=False):
        qs = Booking.objects.select_related('apartment')
        if for_update:
            qs = qs.select_for_update()
        try:
            return qs.get(pk=booking_id)
        except (Booking.DoesNotExist, ValueError, TypeError):
            return None

    def update_status(self, booking, status):
        booking.status = status
        booking.save(update_fields=['status', 'updated_at'])
        return booking

    def delete(self, booking):
        booking.delete()
