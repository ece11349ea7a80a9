from .admission import BookingAdmissionEngine, BookingRequest, KeyedLock
from .dates import DateRange, normalize_date
from .errors import (
    AdmissionError, NotFound, Unavailable, InvalidDateRange, CapacityExceeded,
    MissingGuestInfo, DateConflict, FieldValidationError,
)
from .repositories import DjangoApartmentCatalog, DjangoBookingLedger


def build_admission_engine():
    """Engine wired to the Django-backed catalog and ledger."""
    return BookingAdmissionEngine(DjangoApartmentCatalog(), DjangoBookingLedger())


__all__ = [
    "BookingAdmissionEngine",
    "BookingRequest",
    "KeyedLock",
    "DateRange",
    "normalize_date",
    "AdmissionError",
    "NotFound",
    "Unavailable",
    "InvalidDateRange",
    "CapacityExceeded",
    "MissingGuestInfo",
    "DateConflict",
    "FieldValidationError",
    "DjangoApartmentCatalog",
    "DjangoBookingLedger",
    "build_admission_engine",
]
