from __future__ import annotations

import random
from datetime import timedelta

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from src.apartments.models import Apartment, Booking, Category
from src.apartments.factories import (
    CategoryFactory,
    ApartmentFactory,
    ApartmentImageFactory,
    CATEGORY_NAMES,
)
from src.apartments.services import AdmissionError, BookingRequest, build_admission_engine


class Command(BaseCommand):
    """
    Seed the database with demo data:
    - one category per name in CATEGORY_NAMES
    - apartments spread over those categories, 1-3 generated photos each
    - a few future bookings per apartment, admitted through the booking
      engine so booked dates stay consistent (some requests collide on
      purpose and are rejected with DateConflict)
    """

    help = "Seed the DB with demo categories, apartments, photos and bookings."

    def add_arguments(self, parser):
        parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility.")
        parser.add_argument("--wipe", action="store_true", help="Delete all bookings/apartments/categories first.")
        parser.add_argument("--apartments", type=int, default=20, help="How many apartments to create.")
        parser.add_argument("--bookings", type=int, default=3, help="Booking attempts per apartment.")
        parser.add_argument("--no-images", action="store_true", help="Skip generating photos.")

    def handle(self, *args, **opts):
        if opts["seed"] is not None:
            random.seed(opts["seed"])

        with transaction.atomic():
            categories, apartments = self._seed_catalog(opts)

        # each admission commits its own transaction
        admitted, rejected = self._seed_bookings(apartments, opts["bookings"])

        self.stdout.write(
            self.style.SUCCESS(
                f"Seeding done: categories={len(categories)}, apartments={len(apartments)}, "
                f"bookings admitted={admitted}, rejected={rejected}"
            )
        )

    def _seed_catalog(self, opts):
        if opts["wipe"]:
            self.stdout.write(self.style.WARNING("Wiping bookings, apartments and categories..."))
            Booking.objects.all().delete()
            Apartment.objects.all().delete()
            Category.objects.all().delete()

        categories = [CategoryFactory(name=name) for name in CATEGORY_NAMES]

        apartments = [
            ApartmentFactory(category=categories[i % len(categories)])
            for i in range(opts["apartments"])
        ]
        if not opts["no_images"]:
            for apartment in apartments:
                ApartmentImageFactory(apartment=apartment, is_main=True)
                for _ in range(random.randint(0, 2)):
                    ApartmentImageFactory(apartment=apartment)
        return categories, apartments

    def _seed_bookings(self, apartments, per_apartment):
        engine = build_admission_engine()
        today = timezone.localdate()
        admitted = rejected = 0
        for apartment in apartments:
            for n in range(per_apartment):
                start = today + timedelta(days=random.randint(3, 40))
                end = start + timedelta(days=random.randint(1, 6))
                request = BookingRequest(
                    apartment_id=apartment.pk,
                    check_in=start,
                    check_out=end,
                    guests=random.randint(1, apartment.capacity),
                    guest_name=f"Demo Guest {apartment.pk}-{n}",
                    guest_email=f"guest{apartment.pk}-{n}@example.com",
                    guest_phone=f"+92300{apartment.pk:04d}{n:03d}",
                )
                try:
                    engine.admit(request)
                    admitted += 1
                except AdmissionError:
                    rejected += 1
        return admitted, rejected
