from django.core.management.base import BaseCommand

from src.apartments.models import Apartment


class Command(BaseCommand):
    """
    Print the catalog with its availability flags. Useful when an apartment
    does not show up for booking: it is usually flagged unavailable.
    """

    help = "Summarize apartments and their availability."

    def add_arguments(self, parser):
        parser.add_argument("--unavailable", action="store_true", help="List only unavailable apartments.")

    def handle(self, *args, **opts):
        apartments = Apartment.objects.select_related("category").order_by("-created_at")
        total = apartments.count()
        self.stdout.write(f"Total apartments: {total}")

        if total == 0:
            self.stdout.write(self.style.WARNING("No apartments found."))
            return

        available = apartments.filter(is_available=True).count()
        self.stdout.write(self.style.SUCCESS(f"Available apartments: {available}"))
        self.stdout.write(self.style.WARNING(f"Unavailable apartments: {total - available}"))

        if opts["unavailable"]:
            apartments = apartments.filter(is_available=False)

        self.stdout.write("=" * 80)
        for index, apt in enumerate(apartments, start=1):
            self.stdout.write(f"{index}. {apt.title}")
            self.stdout.write(f"   Location: {apt.location}")
            self.stdout.write(f"   Price: {apt.price}/night")
            self.stdout.write(f"   Available: {'YES' if apt.is_available else 'NO'}")
            self.stdout.write(f"   Category: {apt.category.name if apt.category_id else 'N/A'}")
            self.stdout.write(f"   ID: {apt.pk}")
        self.stdout.write("=" * 80)

        if available < total:
            self.stdout.write(
                "Unavailable apartments cannot be booked: set isAvailable in the admin panel "
                "or with PATCH /api/apartments/<id>/."
            )
