from django.core.validators import MinLengthValidator, MinValueValidator
from django.db import models

from .category import Category


class Apartment(models.Model):
    title = models.CharField(
        max_length=100,
        validators=[MinLengthValidator(5, "Title must be at least 5 characters")],
    )
    location = models.CharField(
        max_length=255,
        validators=[MinLengthValidator(5, "Location must be at least 5 characters")],
    )
    description = models.TextField(max_length=1000, blank=True, default='')
    price = models.DecimalField(  # per night
        max_digits=10, decimal_places=2, db_index=True,
        validators=[MinValueValidator(0, "Price cannot be negative")],
    )
    bedrooms = models.PositiveIntegerField()
    bathrooms = models.PositiveIntegerField()
    capacity = models.PositiveIntegerField(
        validators=[MinValueValidator(1, "Capacity must be at least 1")],
    )
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name='apartments')
    amenities = models.JSONField(default=list, blank=True)
    features = models.JSONField(default=list, blank=True)
    is_available = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['is_available', 'created_at'], name='apt_available_created_idx'),
            models.Index(fields=['capacity'], name='apt_capacity_idx'),
        ]

    def __str__(self):
        return self.title

    @property
    def main_image(self):
        for image in self.images.all():
            if image.is_main:
                return image
        return None


class ApartmentImage(models.Model):
    apartment = models.ForeignKey(Apartment, on_delete=models.CASCADE, related_name='images')
    image = models.ImageField(upload_to='apartments/%Y/%m/%d/')
    is_main = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-is_main', 'created_at']

    def __str__(self):
        return f"Image #{self.pk} for apartment #{self.apartment_id}"


class BookedDateRange(models.Model):
    """
    Nights committed on an apartment: [start, end), checkout day free.
    Written only by the booking admission engine.
    """
    apartment = models.ForeignKey(Apartment, on_delete=models.CASCADE, related_name='booked_dates')
    booking = models.OneToOneField(
        'apartments.Booking',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='booked_range',
    )
    start = models.DateField()
    end = models.DateField()

    class Meta:
        ordering = ['start']
        indexes = [
            models.Index(fields=['apartment', 'start', 'end'], name='booked_range_overlap_idx'),
        ]

    def __str__(self):
        return f"{self.apartment_id}: {self.start} -> {self.end}"
