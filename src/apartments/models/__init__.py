from .category import Category
from .apartment import Apartment, ApartmentImage, BookedDateRange
from .booking import Booking

__all__ = [
    "Category",
    "Apartment",
    "ApartmentImage",
    "BookedDateRange",
    "Booking",
]
