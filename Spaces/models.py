from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from .status import BookingStatus


def normalize_resources(resources):
    """Strip blanks and duplicates, keeping first-seen order."""
    seen = []
    for resource in resources or []:
        clean = str(resource).strip()
        if clean and clean not in seen:
            seen.append(clean)
    return seen


# =========================
# SPACE (BOOKABLE ROOM)
# =========================

class Space(models.Model):
    """
    A shared room or resource that users reserve by the hour.
    Managed by administrators only.
    """

    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)

    capacity = models.PositiveIntegerField(
        validators=[MinValueValidator(1)]
    )

    price_per_hour = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))]
    )

    # Ordered amenity tags, e.g. ["wifi", "projector"]
    resources = models.JSONField(default=list, blank=True)

    image_url = models.CharField(max_length=500, blank=True)

    # Inactive spaces stay visible to admins only
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def clean(self):
        if self.capacity is not None and self.capacity < 1:
            raise ValidationError("Capacity must be a positive number")
        if self.price_per_hour is not None and self.price_per_hour < 0:
            raise ValidationError("Hourly price cannot be negative")

    def save(self, *args, **kwargs):
        self.resources = normalize_resources(self.resources)
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name


# =========================
# BOOKING MODEL
# =========================

class Booking(models.Model):
    """
    A user's reservation of a space for a whole number of hours.
    Starts as pending; lifecycle rules live in Spaces.status.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings"
    )

    space = models.ForeignKey(
        Space,
        on_delete=models.CASCADE,
        related_name="bookings"
    )

    start_datetime = models.DateTimeField()
    end_datetime = models.DateTimeField()

    # Snapshotted at booking time: hours * space.price_per_hour
    total_price = models.DecimalField(max_digits=10, decimal_places=2)

    status = models.CharField(
        max_length=20,
        choices=BookingStatus.choices,
        default=BookingStatus.PENDING
    )

    notes = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["space", "start_datetime"], name="booking_space_start_idx"),
        ]

    def clean(self):
        if self.start_datetime and self.end_datetime:
            if self.start_datetime >= self.end_datetime:
                raise ValidationError("Invalid time range")

    @property
    def start(self):
        return self.start_datetime

    @property
    def end(self):
        return self.end_datetime

    @property
    def duration_hours(self):
        return int((self.end_datetime - self.start_datetime).total_seconds() // 3600)

    def __str__(self):
        return f"{self.space} | {self.start_datetime:%Y-%m-%d %H:%M} | {self.status}"


# =========================
# PAYMENT MODEL
# =========================

class Payment(models.Model):
    """
    Payment recorded when a pending booking is confirmed.
    One-to-one with Booking.
    """

    PIX = "PIX"
    CARD = "CARD"
    CASH = "CASH"

    PAYMENT_METHOD_CHOICES = [
        (PIX, "Pix"),
        (CARD, "Card"),
        (CASH, "Cash"),
    ]

    booking = models.OneToOneField(
        Booking,
        on_delete=models.CASCADE,
        related_name="payment"
    )

    payment_method = models.CharField(
        max_length=20,
        choices=PAYMENT_METHOD_CHOICES
    )

    # Gateway / manual transaction reference
    transaction_ref = models.CharField(
        max_length=100,
        unique=True
    )

    amount_paid = models.DecimalField(
        max_digits=10,
        decimal_places=2
    )

    paid_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.transaction_ref
