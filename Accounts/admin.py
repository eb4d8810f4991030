from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.forms import BaseUserCreationForm
from django.db.models import Count
from django.forms import ModelForm

from Spaces.models import Booking

from .models import User


class ProfileChangeForm(ModelForm):
    class Meta:
        model = User
        fields = "__all__"


class ProfileCreationForm(BaseUserCreationForm):
    class Meta:
        model = User
        fields = ("email", "full_name", "role")


# ----------------------------------
# BOOKINGS OF A USER (READ ONLY)
# ----------------------------------
class UserBookingInline(admin.TabularInline):
    model = Booking
    fk_name = "user"
    extra = 0
    can_delete = False
    show_change_link = True
    fields = ("space", "start_datetime", "end_datetime", "total_price", "status")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


# ----------------------------------
# PROFILE ADMIN
# ----------------------------------
@admin.register(User)
class ProfileAdmin(BaseUserAdmin):
    form = ProfileChangeForm
    add_form = ProfileCreationForm
    model = User
    inlines = [UserBookingInline]

    list_display = ("email", "full_name", "role", "booking_count", "created_at")
    list_filter = ("role", "is_active")
    search_fields = ("email", "full_name")
    ordering = ("-created_at",)

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Profile", {"fields": ("full_name", "avatar_url", "role")}),
        ("Access", {"fields": ("is_active", "is_staff", "is_superuser")}),
        ("Activity", {"fields": ("last_login", "created_at")}),
    )
    readonly_fields = ("created_at", "last_login")

    add_fieldsets = (
        (None, {
            "classes": ("wide",),
            "fields": ("email", "full_name", "role", "password1", "password2"),
        }),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(_booking_count=Count("bookings"))

    @admin.display(description="Bookings", ordering="_booking_count")
    def booking_count(self, obj):
        return obj._booking_count
