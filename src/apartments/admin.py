from django.contrib import admin, messages

from .models import Category, Apartment, ApartmentImage, BookedDateRange, Booking
from .services import AdmissionError, build_admission_engine


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'description', 'created_at')
    search_fields = ('name', 'description')
    readonly_fields = ('created_at', 'updated_at')
    ordering = ('name',)


class ApartmentImageInline(admin.TabularInline):
    model = ApartmentImage
    extra = 0
    fields = ('image', 'is_main', 'created_at')
    readonly_fields = ('created_at',)


class BookedDateRangeInline(admin.TabularInline):
    """Read only: ranges change through bookings."""
    model = BookedDateRange
    extra = 0
    fields = ('start', 'end', 'booking')
    readonly_fields = ('start', 'end', 'booking')
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Apartment)
class ApartmentAdmin(admin.ModelAdmin):
    list_display = (
        'id', 'title', 'location', 'price', 'capacity',
        'category', 'is_available', 'created_at'
    )
    list_filter = ('is_available', 'category', 'bedrooms', 'created_at')
    date_hierarchy = 'created_at'
    search_fields = ('id', 'title', 'location', 'description')
    readonly_fields = ('created_at', 'updated_at')
    ordering = ('-created_at',)
    list_select_related = ('category',)
    inlines = (ApartmentImageInline, BookedDateRangeInline)


def _set_status(modeladmin, request, queryset, status):
    engine = build_admission_engine()
    changed = 0
    for booking in queryset:
        try:
            engine.change_status(booking.pk, status)
            changed += 1
        except AdmissionError as exc:
            modeladmin.message_user(request, f"Booking #{booking.pk}: {exc.message}", level=messages.ERROR)
    if changed:
        modeladmin.message_user(request, f"{changed} booking(s) set to {status}.")


@admin.action(description="Confirm selected bookings")
def confirm_bookings(modeladmin, request, queryset):
    _set_status(modeladmin, request, queryset, Booking.CONFIRMED)


@admin.action(description="Check in selected bookings")
def check_in_bookings(modeladmin, request, queryset):
    _set_status(modeladmin, request, queryset, Booking.CHECKED_IN)


@admin.action(description="Check out selected bookings")
def check_out_bookings(modeladmin, request, queryset):
    _set_status(modeladmin, request, queryset, Booking.CHECKED_OUT)


@admin.action(description="Cancel selected bookings")
def cancel_bookings(modeladmin, request, queryset):
    _set_status(modeladmin, request, queryset, Booking.CANCELLED)


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    """Bookings are created through the API; here only the status moves."""
    list_display = (
        'id', 'apartment', 'guest_name', 'guest_email',
        'status', 'check_in', 'check_out', 'total_price', 'created_at'
    )
    list_filter = ('status', 'apartment', 'check_in', 'created_at')
    date_hierarchy = 'created_at'
    search_fields = ('guest_name', 'guest_email', 'guest_phone', 'apartment__title')
    ordering = ('-created_at',)
    list_select_related = ('apartment',)
    actions = (confirm_bookings, check_in_bookings, check_out_bookings, cancel_bookings)
    readonly_fields = (
        'apartment', 'check_in', 'check_out', 'guests', 'number_of_nights', 'total_price',
        'guest_name', 'guest_email', 'guest_phone', 'user', 'created_at', 'updated_at',
    )

    def has_add_permission(self, request):
        return False

    def save_model(self, request, obj, form, change):
        if change and 'status' in form.changed_data:
            try:
                build_admission_engine().change_status(obj.pk, obj.status)
            except AdmissionError as exc:
                self.message_user(request, exc.message, level=messages.ERROR)
            return
        super().save_model(request, obj, form, change)

    def delete_model(self, request, obj):
        build_admission_engine().remove(obj.pk)

    def delete_queryset(self, request, queryset):
        engine = build_admission_engine()
        for booking in queryset:
            engine.remove(booking.pk)
