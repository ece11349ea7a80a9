"""
Booking admission: the only code path that writes an apartment's booked
ranges. Every write runs under a per-apartment mutex and a single store
transaction, so two overlapping requests for the same apartment can never
both be admitted.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email

from ..models import Booking
from .dates import DateRange, normalize_date
from .errors import (
    AdmissionError, NotFound, Unavailable, InvalidDateRange, CapacityExceeded,
    MissingGuestInfo, DateConflict, FieldValidationError,
)

logger = logging.getLogger(__name__)

STATUSES = frozenset(value for value, _ in Booking.STATUS_CHOICES)


@dataclass(frozen=True)
class BookingRequest:
    apartment_id: Any
    check_in: Any
    check_out: Any
    guests: int
    guest_name: str = ""
    guest_email: str = ""
    guest_phone: str = ""
    total_price: Optional[Decimal] = None
    user_id: Optional[int] = None


class KeyedLock:
    """
    One mutex per key. An entry lives only while somebody holds or waits
    on it, so ids that never existed do not pile up.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = {}  # key -> [lock, holders]

    def __len__(self):
        return len(self._locks)

    @contextmanager
    def hold(self, key):
        key = str(key)
        with self._guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]


# Shared by every engine in the process so that engines built per request
# still serialize on the same apartment.
apartment_locks = KeyedLock()


class BookingAdmissionEngine:

    def __init__(self, catalog, ledger, locks: Optional[KeyedLock] = None):
        self.catalog = catalog
        self.ledger = ledger
        self.locks = locks if locks is not None else apartment_locks

    # -------------------------
    # Admission
    # -------------------------
    def admit(self, request: BookingRequest):
        """
        Validate the request, then persist the booking (status=pending) and
        append its range to the apartment's booked dates in one transaction.
        Raises an AdmissionError subclass without writing anything on rejection.

        The apartment lock is released when this method returns, so callers
        must not wrap it in an outer transaction: the writes have to be
        committed before the next admission for the apartment reads them.
        """
        try:
            with self.locks.hold(request.apartment_id), self.catalog.atomic():
                apartment = self.catalog.find_by_id(request.apartment_id, for_update=True)
                stay = self._validate(apartment, request)
                self._ensure_free(apartment, stay)

                nights = stay.nights
                if request.total_price is not None:
                    total_price = request.total_price
                else:
                    total_price = apartment.price * nights

                booking = self.ledger.create(
                    apartment=apartment,
                    check_in=stay.start,
                    check_out=stay.end,
                    guests=request.guests,
                    number_of_nights=nights,
                    total_price=total_price,
                    guest_name=request.guest_name.strip(),
                    guest_email=request.guest_email.strip().lower(),
                    guest_phone=request.guest_phone.strip(),
                    user_id=request.user_id,
                    status=Booking.PENDING,
                )
                self.catalog.reserve(apartment, stay, booking)
        except AdmissionError as exc:
            logger.info("booking rejected for apartment %s: %s (%s)",
                        request.apartment_id, exc.kind, exc.message)
            raise

        logger.info("booking %s admitted for apartment %s: %s -> %s, %s night(s)",
                    booking.pk, apartment.pk, stay.start, stay.end, nights)
        return booking

    def _validate(self, apartment, request) -> DateRange:
        if apartment is None:
            raise NotFound("Invalid apartment ID")
        if not apartment.is_available:
            raise Unavailable()

        check_in = normalize_date(request.check_in)
        check_out = normalize_date(request.check_out)
        if check_in is None or check_out is None:
            raise InvalidDateRange("Check-in and check-out must be valid dates.")
        if check_out <= check_in:
            raise InvalidDateRange()

        guests = request.guests
        if isinstance(guests, bool) or not isinstance(guests, int) or guests < 1:
            raise CapacityExceeded("At least 1 guest is required.")
        if guests > apartment.capacity:
            raise CapacityExceeded(
                f"Number of guests exceeds apartment capacity. Maximum: {apartment.capacity}"
            )

        name = (request.guest_name or "").strip()
        email = (request.guest_email or "").strip()
        phone = (request.guest_phone or "").strip()
        if not (name and email and phone):
            raise MissingGuestInfo()
        try:
            validate_email(email)
        except DjangoValidationError:
            raise MissingGuestInfo("Please provide a valid email address.")
        if len(name) < 2:
            raise FieldValidationError("Guest name must be at least 2 characters.")

        return DateRange(check_in, check_out)

    def _ensure_free(self, apartment, stay, exclude_booking_id=None):
        """Both the cached booked ranges and the ledger must be clear."""
        for taken in self.catalog.booked_ranges(apartment):
            if taken.overlaps(stay):
                raise DateConflict()

        clashes = self.ledger.find_overlapping(
            apartment.pk, stay.start, stay.end,
            exclude_status=Booking.CANCELLED,
            exclude_booking_id=exclude_booking_id,
        )
        if clashes:
            raise DateConflict()

    # -------------------------
    # Lifecycle (admin actions)
    # -------------------------
    def change_status(self, booking_id, status):
        """
        Any status may follow any other. Cancelling frees the booked range;
        leaving `cancelled` claims it again and fails with DateConflict when
        the dates were taken in the meantime.
        """
        if status not in STATUSES:
            raise FieldValidationError(f"Unknown status: {status}")

        booking = self._get_booking(booking_id)
        with self.locks.hold(booking.apartment_id), self.catalog.atomic():
            booking = self._get_booking(booking_id, for_update=True)
            previous = booking.status

            if status == Booking.CANCELLED and previous != Booking.CANCELLED:
                self.catalog.release(booking)
            elif previous == Booking.CANCELLED and status != Booking.CANCELLED:
                apartment = self.catalog.find_by_id(booking.apartment_id, for_update=True)
                stay = DateRange(booking.check_in, booking.check_out)
                self._ensure_free(apartment, stay, exclude_booking_id=booking.pk)
                self.catalog.reserve(apartment, stay, booking)

            booking = self.ledger.update_status(booking, status)

        logger.info("booking %s status %s -> %s", booking.pk, previous, status)
        return booking

    def remove(self, booking_id):
        """Delete a booking and free its range."""
        booking = self._get_booking(booking_id)
        with self.locks.hold(booking.apartment_id), self.catalog.atomic():
            booking = self._get_booking(booking_id, for_update=True)
            self.catalog.release(booking)
            self.ledger.delete(booking)
        logger.info("booking %s deleted", booking_id)
        return booking

    def _get_booking(self, booking_id, for_update=False):
        booking = self.ledger.get(booking_id, for_update=for_update)
        if booking is None:
            raise NotFound("Booking not found")
        return booking
