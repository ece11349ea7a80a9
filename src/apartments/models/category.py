from django.core.validators import MinLengthValidator
from django.db import models


class Category(models.Model):
    """Apartment type, e.g. Studio, 1BHK, 2BHK."""
    name = models.CharField(
        max_length=50,
        unique=True,
        validators=[MinLengthValidator(2, "Category name must be at least 2 characters")],
    )
    description = models.CharField(max_length=200, blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name_plural = 'categories'

    def __str__(self):
        return self.name
