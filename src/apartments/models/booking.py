from django.conf import settings
from django.db import models

from .apartment import Apartment


class Booking(models.Model):
    """Guest reservation for an apartment, admitted by the booking engine."""
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CHECKED_IN = 'checked-in'
    CHECKED_OUT = 'checked-out'
    CANCELLED = 'cancelled'
    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (CONFIRMED, 'Confirmed'),
        (CHECKED_IN, 'Checked in'),
        (CHECKED_OUT, 'Checked out'),
        (CANCELLED, 'Cancelled'),
    ]

    apartment = models.ForeignKey(Apartment, on_delete=models.CASCADE, related_name='bookings')
    check_in = models.DateField()
    check_out = models.DateField()
    guests = models.PositiveIntegerField()
    number_of_nights = models.PositiveIntegerField()
    total_price = models.DecimalField(max_digits=12, decimal_places=2)

    guest_name = models.CharField(max_length=100)
    guest_email = models.EmailField()
    guest_phone = models.CharField(max_length=30)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='bookings',
    )

    status = models.CharField(max_length=12, choices=STATUS_CHOICES, default=PENDING, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(
                fields=['apartment', 'status', 'check_in', 'check_out'],
                name='booking_overlap_idx',
            ),
            models.Index(fields=['guest_email'], name='booking_guest_email_idx'),
        ]

    def __str__(self):
        return f"{self.guest_name} → {self.apartment} [{self.status}]"

    @property
    def is_active(self):
        return self.status != self.CANCELLED
