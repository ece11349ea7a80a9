from decimal import Decimal

import pytest

from src.apartments.models import Booking
from src.apartments.services import (
    BookingAdmissionEngine, BookingRequest, KeyedLock, NotFound, DateConflict, FieldValidationError,
)
from .fakes import FakeApartment, InMemoryApartmentCatalog, InMemoryBookingLedger


@pytest.fixture
def setup():
    ledger = InMemoryBookingLedger()
    apartment = FakeApartment(pk=1, price=Decimal("100"), capacity=3)
    catalog = InMemoryApartmentCatalog(ledger, [apartment])
    engine = BookingAdmissionEngine(catalog, ledger, locks=KeyedLock())
    return engine, apartment, ledger


def book(engine, check_in="2024-06-01", check_out="2024-06-04", email="guest@example.com"):
    return engine.admit(BookingRequest(
        apartment_id=1, check_in=check_in, check_out=check_out, guests=1,
        guest_name="Guest", guest_email=email, guest_phone="123",
    ))


def test_any_status_can_follow_any_other(setup):
    engine, _, _ = setup
    booking = book(engine)
    for status in (Booking.CHECKED_OUT, Booking.PENDING, Booking.CHECKED_IN, Booking.CONFIRMED):
        assert engine.change_status(booking.pk, status).status == status


def test_unknown_status_is_rejected(setup):
    engine, _, _ = setup
    booking = book(engine)
    with pytest.raises(FieldValidationError):
        engine.change_status(booking.pk, "archived")


def test_cancelling_frees_the_range(setup):
    engine, apartment, _ = setup
    booking = book(engine)

    engine.change_status(booking.pk, Booking.CANCELLED)

    assert apartment.booked == []
    other = book(engine, email="second@example.com")
    assert other.status == Booking.PENDING


def test_reinstating_cancelled_booking_reserves_again(setup):
    engine, apartment, _ = setup
    booking = book(engine)
    engine.change_status(booking.pk, Booking.CANCELLED)

    engine.change_status(booking.pk, Booking.CONFIRMED)

    assert [pk for _, pk in apartment.booked] == [booking.pk]
    with pytest.raises(DateConflict):
        book(engine, email="late@example.com")


def test_reinstating_fails_when_dates_were_taken(setup):
    engine, apartment, ledger = setup
    booking = book(engine)
    engine.change_status(booking.pk, Booking.CANCELLED)
    taken = book(engine, check_in="2024-06-03", check_out="2024-06-05", email="new@example.com")

    with pytest.raises(DateConflict):
        engine.change_status(booking.pk, Booking.PENDING)

    assert ledger.get(booking.pk).status == Booking.CANCELLED
    assert [pk for _, pk in apartment.booked] == [taken.pk]


def test_cancel_twice_is_harmless(setup):
    engine, apartment, _ = setup
    booking = book(engine)
    engine.change_status(booking.pk, Booking.CANCELLED)
    engine.change_status(booking.pk, Booking.CANCELLED)
    assert apartment.booked == []


def test_remove_deletes_and_frees(setup):
    engine, apartment, ledger = setup
    booking = book(engine)

    engine.remove(booking.pk)

    assert ledger.get(booking.pk) is None
    assert apartment.booked == []


def test_unknown_booking_is_not_found(setup):
    engine, _, _ = setup
    with pytest.raises(NotFound):
        engine.change_status(404, Booking.CONFIRMED)
    with pytest.raises(NotFound):
        engine.remove("abc")
