import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(
                    max_length=50,
                    unique=True,
                    validators=[django.core.validators.MinLengthValidator(2, "Category name must be at least 2 characters")],
                )),
                ("description", models.CharField(blank=True, default="", max_length=200)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "verbose_name_plural": "categories",
            },
        ),
        migrations.CreateModel(
            name="Apartment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(
                    max_length=100,
                    validators=[django.core.validators.MinLengthValidator(5, "Title must be at least 5 characters")],
                )),
                ("location", models.CharField(
                    max_length=255,
                    validators=[django.core.validators.MinLengthValidator(5, "Location must be at least 5 characters")],
                )),
                ("description", models.TextField(blank=True, default="", max_length=1000)),
                ("price", models.DecimalField(
                    db_index=True,
                    decimal_places=2,
                    max_digits=10,
                    validators=[django.core.validators.MinValueValidator(0, "Price cannot be negative")],
                )),
                ("bedrooms", models.PositiveIntegerField()),
                ("bathrooms", models.PositiveIntegerField()),
                ("capacity", models.PositiveIntegerField(
                    validators=[django.core.validators.MinValueValidator(1, "Capacity must be at least 1")],
                )),
                ("amenities", models.JSONField(blank=True, default=list)),
                ("features", models.JSONField(blank=True, default=list)),
                ("is_available", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("category", models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name="apartments",
                    to="apartments.category",
                )),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["is_available", "created_at"], name="apt_available_created_idx"),
                    models.Index(fields=["capacity"], name="apt_capacity_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ApartmentImage",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("image", models.ImageField(upload_to="apartments/%Y/%m/%d/")),
                ("is_main", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("apartment", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="images",
                    to="apartments.apartment",
                )),
            ],
            options={
                "ordering": ["-is_main", "created_at"],
            },
        ),
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("check_in", models.DateField()),
                ("check_out", models.DateField()),
                ("guests", models.PositiveIntegerField()),
                ("number_of_nights", models.PositiveIntegerField()),
                ("total_price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("guest_name", models.CharField(max_length=100)),
                ("guest_email", models.EmailField(max_length=254)),
                ("guest_phone", models.CharField(max_length=30)),
                ("status", models.CharField(
                    choices=[
                        ("pending", "Pending"),
                        ("confirmed", "Confirmed"),
                        ("checked-in", "Checked in"),
                        ("checked-out", "Checked out"),
                        ("cancelled", "Cancelled"),
                    ],
                    db_index=True,
                    default="pending",
                    max_length=12,
                )),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("apartment", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="bookings",
                    to="apartments.apartment",
                )),
                ("user", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="bookings",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["apartment", "status", "check_in", "check_out"], name="booking_overlap_idx"),
                    models.Index(fields=["guest_email"], name="booking_guest_email_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="BookedDateRange",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("start", models.DateField()),
                ("end", models.DateField()),
                ("apartment", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="booked_dates",
                    to="apartments.apartment",
                )),
                ("booking", models.OneToOneField(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="booked_range",
                    to="apartments.booking",
                )),
            ],
            options={
                "ordering": ["start"],
                "indexes": [
                    models.Index(fields=["apartment", "start", "end"], name="booked_range_overlap_idx"),
                ],
            },
        ),
    ]
