import random
from decimal import Decimal
from datetime import timedelta

import factory
from django.contrib.auth import get_user_model
from django.utils import timezone
from factory import Faker, post_generation
from factory.django import DjangoModelFactory, ImageField

from .models import Category, Apartment, ApartmentImage, BookedDateRange, Booking

CITIES = ("Lahore", "Karachi", "Islamabad", "Rawalpindi", "Murree", "Faisalabad", "Multan", "Peshawar")

AMENITY_POOL = ("wifi", "parking", "air conditioning", "kitchen", "heating", "tv", "washer", "balcony")
FEATURE_POOL = ("city view", "pet friendly", "near metro", "garden", "lift", "security")

CATEGORY_NAMES = ("Studio", "Family", "Luxury", "Budget", "Penthouse", "Cottage")

# ---------------------------------------------------------------------------

class UserFactory(DjangoModelFactory):
    """
    Regular user. CustomUser has no 'username' field, so only email & names.
    Password is hashed in @post_generation.
    """
    class Meta:
        model = get_user_model()
        django_get_or_create = ("email",)

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    first_name = Faker("first_name")
    last_name = Faker("last_name")

    @post_generation
    def password(self, create, extracted, **kwargs):
        self.set_password(extracted or "Passw0rd!")
        if create:
            self.save()


class AdminUserFactory(UserFactory):
    """Staff user: admin in the API."""
    email = factory.Sequence(lambda n: f"admin{n}@example.com")
    is_staff = True

# ---------------------------------------------------------------------------

class CategoryFactory(DjangoModelFactory):
    class Meta:
        model = Category
        django_get_or_create = ("name",)

    name = factory.Sequence(lambda n: f"{CATEGORY_NAMES[n % len(CATEGORY_NAMES)]} {n}")
    description = Faker("sentence", nb_words=8)


class ApartmentFactory(DjangoModelFactory):
    class Meta:
        model = Apartment

    class Params:
        city = factory.LazyFunction(lambda: random.choice(CITIES))

    title = factory.LazyAttribute(
        lambda o: f"{random.choice(['Cozy', 'Sunny', 'Modern', 'Quiet'])} "
                  f"{random.choice(['Studio', 'Apartment', 'Flat', 'Suite'])} in {o.city}"
    )
    location = factory.LazyAttribute(lambda o: f"{o.city}, Pakistan")
    description = Faker("paragraph", nb_sentences=3)
    price = factory.LazyFunction(lambda: Decimal(random.randrange(5000, 30000, 500)))  # per night
    bedrooms = factory.LazyFunction(lambda: random.randint(1, 4))
    bathrooms = factory.LazyFunction(lambda: random.randint(1, 3))
    capacity = factory.LazyFunction(lambda: random.randint(2, 8))
    category = factory.SubFactory(CategoryFactory)
    amenities = factory.LazyFunction(lambda: random.sample(AMENITY_POOL, 3))
    features = factory.LazyFunction(lambda: random.sample(FEATURE_POOL, 2))
    is_available = True


class ApartmentImageFactory(DjangoModelFactory):
    """Generated placeholder image 1280x720."""
    class Meta:
        model = ApartmentImage

    apartment = factory.SubFactory(ApartmentFactory)
    image = ImageField(width=1280, height=720, format="JPEG")
    is_main = False


class BookingFactory(DjangoModelFactory):
    """
    Booking row written directly, bypassing admission (fixtures only).
    Active bookings also get their booked range, as admission would add it.
    """
    class Meta:
        model = Booking

    apartment = factory.SubFactory(ApartmentFactory)
    check_in = factory.LazyFunction(lambda: timezone.localdate() + timedelta(days=random.randint(5, 20)))
    check_out = factory.LazyAttribute(lambda o: o.check_in + timedelta(days=random.randint(2, 7)))
    guests = 2
    number_of_nights = factory.LazyAttribute(lambda o: (o.check_out - o.check_in).days)
    total_price = factory.LazyAttribute(lambda o: o.apartment.price * o.number_of_nights)
    guest_name = Faker("name")
    guest_email = factory.Sequence(lambda n: f"guest{n}@example.com")
    guest_phone = factory.Sequence(lambda n: f"+92300{n:07d}")
    status = Booking.PENDING

    @post_generation
    def reserve_range(self, create, extracted, **kwargs):
        if create and self.status != Booking.CANCELLED and extracted is not False:
            BookedDateRange.objects.create(
                apartment=self.apartment, booking=self, start=self.check_in, end=self.check_out,
            )
