import threading
from datetime import date, datetime
from decimal import Decimal

import pytest

from src.apartments.models import Booking
from src.apartments.services import (
    BookingAdmissionEngine, BookingRequest, KeyedLock, DateRange,
    NotFound, Unavailable, InvalidDateRange, CapacityExceeded,
    MissingGuestInfo, DateConflict, FieldValidationError,
)
from .fakes import FakeApartment, InMemoryApartmentCatalog, InMemoryBookingLedger


@pytest.fixture
def ledger():
    return InMemoryBookingLedger()


@pytest.fixture
def apartment():
    return FakeApartment(pk=1, price=Decimal("15000"), capacity=4)


@pytest.fixture
def catalog(ledger, apartment):
    return InMemoryApartmentCatalog(ledger, [apartment])


@pytest.fixture
def engine(catalog, ledger):
    return BookingAdmissionEngine(catalog, ledger, locks=KeyedLock())


def make_request(**overrides):
    data = dict(
        apartment_id=1,
        check_in="2024-01-10",
        check_out="2024-01-13",
        guests=2,
        guest_name="Ayesha Khan",
        guest_email="ayesha@example.com",
        guest_phone="+923001234567",
    )
    data.update(overrides)
    return BookingRequest(**data)


def snapshot(catalog, ledger):
    return (
        {pk: list(a.booked) for pk, a in catalog.apartments.items()},
        {pk: b.status for pk, b in ledger.bookings.items()},
    )


# ---------- computation ----------

def test_nights_and_price_are_computed(engine, apartment):
    booking = engine.admit(make_request())

    assert booking.number_of_nights == 3
    assert booking.total_price == Decimal("45000")
    assert booking.status == Booking.PENDING
    assert booking.check_in == date(2024, 1, 10)
    assert booking.check_out == date(2024, 1, 13)
    assert [rng for rng, _ in apartment.booked] == [DateRange(date(2024, 1, 10), date(2024, 1, 13))]


def test_total_price_override_wins_even_when_zero(engine):
    booking = engine.admit(make_request(total_price=Decimal("0")))
    assert booking.total_price == Decimal("0")


def test_time_of_day_is_stripped(engine):
    booking = engine.admit(make_request(
        check_in=datetime(2024, 1, 10, 15, 30),
        check_out="2024-01-13T11:00:00",
    ))
    assert booking.check_in == date(2024, 1, 10)
    assert booking.check_out == date(2024, 1, 13)
    assert booking.number_of_nights == 3


def test_guest_contact_is_normalized(engine):
    booking = engine.admit(make_request(guest_email="  Ayesha@Example.COM ", guest_name=" Ayesha Khan "))
    assert booking.guest_email == "ayesha@example.com"
    assert booking.guest_name == "Ayesha Khan"


def test_user_id_is_recorded(engine):
    booking = engine.admit(make_request(user_id=7))
    assert booking.user_id == 7


# ---------- validation ----------

def test_unknown_apartment_is_not_found(engine):
    with pytest.raises(NotFound):
        engine.admit(make_request(apartment_id=999))


def test_unavailable_apartment_is_rejected(engine, apartment):
    apartment.is_available = False
    with pytest.raises(Unavailable):
        engine.admit(make_request())


@pytest.mark.parametrize("check_in, check_out", [
    ("2024-01-13", "2024-01-10"),
    ("2024-01-10", "2024-01-10"),
    ("not-a-date", "2024-01-13"),
    ("2024-02-30", "2024-03-02"),
    (None, "2024-01-13"),
])
def test_bad_date_ranges(engine, check_in, check_out):
    with pytest.raises(InvalidDateRange):
        engine.admit(make_request(check_in=check_in, check_out=check_out))


def test_capacity_exceeded(engine):
    with pytest.raises(CapacityExceeded) as exc:
        engine.admit(make_request(guests=5))
    assert "Maximum: 4" in exc.value.message


@pytest.mark.parametrize("guests", [0, -1, True])
def test_guest_count_must_be_positive_integer(engine, guests):
    with pytest.raises(CapacityExceeded):
        engine.admit(make_request(guests=guests))


def test_guests_equal_to_capacity_is_accepted(engine):
    assert engine.admit(make_request(guests=4)).guests == 4


@pytest.mark.parametrize("field", ["guest_name", "guest_email", "guest_phone"])
def test_missing_guest_info(engine, ledger, apartment, field):
    with pytest.raises(MissingGuestInfo):
        engine.admit(make_request(**{field: "  "}))
    assert ledger.bookings == {}
    assert apartment.booked == []


def test_malformed_email_is_missing_guest_info(engine):
    with pytest.raises(MissingGuestInfo):
        engine.admit(make_request(guest_email="not-an-email"))


def test_short_guest_name_is_validation_error(engine):
    with pytest.raises(FieldValidationError) as exc:
        engine.admit(make_request(guest_name="A"))
    assert exc.value.kind == "ValidationError"


def test_checks_run_in_order(engine, apartment):
    # unavailable wins over bad dates and capacity
    apartment.is_available = False
    with pytest.raises(Unavailable):
        engine.admit(make_request(check_in="bad", guests=50, guest_email=""))


# ---------- overlap ----------

def test_overlap_conflicts_and_abutting_stay_is_accepted(engine):
    engine.admit(make_request(check_in="2024-02-01", check_out="2024-02-05"))

    with pytest.raises(DateConflict):
        engine.admit(make_request(check_in="2024-02-04", check_out="2024-02-06"))

    booking = engine.admit(make_request(check_in="2024-02-05", check_out="2024-02-08"))
    assert booking.number_of_nights == 3


def test_stay_ending_on_existing_check_in_is_accepted(engine):
    engine.admit(make_request(check_in="2024-02-05", check_out="2024-02-08"))
    engine.admit(make_request(check_in="2024-02-01", check_out="2024-02-05"))


def test_enclosing_range_conflicts(engine):
    engine.admit(make_request(check_in="2024-02-03", check_out="2024-02-04"))
    with pytest.raises(DateConflict):
        engine.admit(make_request(check_in="2024-02-01", check_out="2024-02-10"))


def test_ledger_is_checked_even_when_cached_ranges_are_clear(engine, ledger, apartment):
    ledger.create(
        apartment=apartment, check_in=date(2024, 3, 1), check_out=date(2024, 3, 4), guests=1,
        number_of_nights=3, total_price=Decimal("1"), guest_name="Old", guest_email="old@example.com",
        guest_phone="1", status=Booking.CONFIRMED,
    )
    with pytest.raises(DateConflict):
        engine.admit(make_request(check_in="2024-03-02", check_out="2024-03-05"))


def test_cancelled_ledger_rows_do_not_block(engine, ledger, apartment):
    ledger.create(
        apartment=apartment, check_in=date(2024, 3, 1), check_out=date(2024, 3, 4), guests=1,
        number_of_nights=3, total_price=Decimal("1"), guest_name="Old", guest_email="old@example.com",
        guest_phone="1", status=Booking.CANCELLED,
    )
    engine.admit(make_request(check_in="2024-03-02", check_out="2024-03-05"))


def test_other_apartments_do_not_conflict(engine, catalog):
    catalog.add(FakeApartment(pk=2))
    engine.admit(make_request(check_in="2024-02-01", check_out="2024-02-05"))
    engine.admit(make_request(apartment_id=2, check_in="2024-02-01", check_out="2024-02-05"))


# ---------- no partial writes ----------

@pytest.mark.parametrize("overrides", [
    {"apartment_id": 42},
    {"guests": 9},
    {"check_out": "2024-01-01"},
    {"guest_email": ""},
    {"check_in": "2024-01-11", "check_out": "2024-01-12"},
])
def test_rejection_leaves_state_unchanged(engine, catalog, ledger, overrides):
    engine.admit(make_request())
    before = snapshot(catalog, ledger)

    with pytest.raises(Exception):
        engine.admit(make_request(**overrides))

    assert snapshot(catalog, ledger) == before


def test_store_failure_after_ledger_write_rolls_back(engine, catalog, ledger, apartment):
    catalog.fail_reserve = True
    with pytest.raises(RuntimeError):
        engine.admit(make_request())
    assert ledger.bookings == {}
    assert apartment.booked == []


# ---------- concurrency ----------

def test_concurrent_identical_requests_admit_exactly_one(ledger, apartment):
    catalog = InMemoryApartmentCatalog(ledger, [apartment], find_delay=0.02)
    engine = BookingAdmissionEngine(catalog, ledger, locks=KeyedLock())
    barrier = threading.Barrier(2)
    results = []

    def attempt():
        barrier.wait()
        try:
            engine.admit(make_request())
            results.append("ok")
        except DateConflict:
            results.append("conflict")

    threads = [threading.Thread(target=attempt) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(results) == ["conflict", "ok"]
    assert len(ledger.bookings) == 1
    assert len(apartment.booked) == 1


def test_engines_sharing_locks_still_serialize(ledger, apartment):
    catalog = InMemoryApartmentCatalog(ledger, [apartment], find_delay=0.02)
    locks = KeyedLock()
    engines = [BookingAdmissionEngine(catalog, ledger, locks=locks) for _ in range(4)]
    barrier = threading.Barrier(len(engines))
    results = []

    def attempt(engine):
        barrier.wait()
        try:
            engine.admit(make_request(check_in="2024-05-01", check_out="2024-05-03"))
            results.append("ok")
        except DateConflict:
            results.append("conflict")

    threads = [threading.Thread(target=attempt, args=(e,)) for e in engines]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count("ok") == 1
    assert results.count("conflict") == 3
    assert len(locks) == 0


def test_lock_registry_does_not_grow_with_unknown_ids(ledger, apartment):
    catalog = InMemoryApartmentCatalog(ledger, [apartment])
    locks = KeyedLock()
    engine = BookingAdmissionEngine(catalog, ledger, locks=locks)

    for apartment_id in range(900000, 900025):
        with pytest.raises(NotFound):
            engine.admit(make_request(apartment_id=apartment_id))
    engine.admit(make_request())

    assert len(locks) == 0


def test_lock_entry_is_dropped_after_an_error():
    locks = KeyedLock()
    with pytest.raises(RuntimeError):
        with locks.hold(7):
            assert len(locks) == 1
            raise RuntimeError("boom")
    assert len(locks) == 0
