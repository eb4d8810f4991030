# Spaces/admin.py

from django.contrib import admin
from .models import (
    Space,
    Booking,
    Payment,
)
from .status import is_terminal


# -------------------------------
# SPACE ADMIN
# -------------------------------
@admin.register(Space)
class SpaceAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "name",
        "capacity",
        "price_per_hour",
        "is_active",
        "created_at",
    )

    list_filter = ("is_active",)
    search_fields = ("name", "description")
    readonly_fields = ("created_at",)


# -------------------------------
# PAYMENT INLINE
# -------------------------------
class PaymentInline(admin.StackedInline):
    model = Payment
    extra = 0
    can_delete = False
    readonly_fields = ("payment_method", "transaction_ref", "amount_paid", "paid_at")


# -------------------------------
# BOOKING ADMIN
# -------------------------------
@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "space",
        "user",
        "start_datetime",
        "end_datetime",
        "total_price",
        "status",
    )

    list_filter = ("status", "space")
    search_fields = ("space__name", "user__email", "user__full_name")
    ordering = ("-created_at",)

    # Price and times are snapshotted at creation
    readonly_fields = ("total_price", "created_at")

    inlines = [PaymentInline]

    def has_delete_permission(self, request, obj=None):
        if obj and not is_terminal(obj.status):
            return False
        return super().has_delete_permission(request, obj)
