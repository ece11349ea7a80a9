from io import StringIO

import pytest
from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.db import connection

from src.apartments.factories import ApartmentFactory
from src.apartments.models import Apartment, BookedDateRange, Booking, Category
from src.apartments.services import BookingAdmissionEngine


def run(*args, **kwargs):
    out = StringIO()
    call_command(*args, stdout=out, **kwargs)
    return out.getvalue()


@pytest.mark.django_db
def test_check_apartments_on_empty_catalog():
    assert "No apartments found." in run("check_apartments")


@pytest.mark.django_db
def test_check_apartments_lists_availability():
    ApartmentFactory(title="Open flat in Lahore")
    ApartmentFactory(title="Closed flat in Karachi", is_available=False)

    out = run("check_apartments")
    assert "Total apartments: 2" in out
    assert "Available apartments: 1" in out
    assert "Open flat in Lahore" in out
    assert "cannot be booked" in out

    out = run("check_apartments", "--unavailable")
    assert "Closed flat in Karachi" in out
    assert "Open flat in Lahore" not in out


@pytest.mark.django_db
def test_seed_apartments_keeps_ledger_consistent():
    out = run("seed_apartments", "--seed", "7", "--apartments", "4", "--bookings", "4", "--no-images")

    assert "Seeding done" in out
    assert Apartment.objects.count() == 4
    assert Category.objects.exists()

    for booking in Booking.objects.exclude(status=Booking.CANCELLED):
        ranges = BookedDateRange.objects.filter(booking=booking)
        assert ranges.count() == 1
        for other in Booking.objects.filter(apartment=booking.apartment).exclude(pk=booking.pk):
            assert not (booking.check_in < other.check_out and other.check_in < booking.check_out)


@pytest.mark.django_db(transaction=True)
def test_seed_apartments_admits_outside_an_outer_transaction(monkeypatch):
    nested = []
    original_admit = BookingAdmissionEngine.admit

    def recording_admit(self, request):
        nested.append(connection.in_atomic_block)
        return original_admit(self, request)

    monkeypatch.setattr(BookingAdmissionEngine, "admit", recording_admit)
    run("seed_apartments", "--seed", "3", "--apartments", "2", "--bookings", "2", "--no-images")

    assert nested == [False] * 4
    assert Booking.objects.count() == BookedDateRange.objects.count()


@pytest.mark.django_db
def test_seed_apartments_wipe():
    run("seed_apartments", "--apartments", "2", "--bookings", "0", "--no-images")
    run("seed_apartments", "--wipe", "--apartments", "3", "--bookings", "0", "--no-images")
    assert Apartment.objects.count() == 3
    assert Booking.objects.count() == 0


@pytest.mark.django_db
def test_create_admin_is_idempotent():
    out = run("create_admin", "--email", "Boss@Example.com", "--password", "S3cure-pass!")
    assert "Admin user created: boss@example.com" in out

    user = get_user_model().objects.get(email="boss@example.com")
    assert user.is_staff and user.is_admin
    assert user.check_password("S3cure-pass!")

    out = run("create_admin", "--email", "boss@example.com")
    assert "already exists" in out
    assert get_user_model().objects.count() == 1
