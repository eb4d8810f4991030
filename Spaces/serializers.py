from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from Accounts.context import ActorContext
from slots.constants import get_rule
from slots.services import validate_selection

from . import service
from .models import Booking, Payment, Space, normalize_resources
from .status import BookingStatus, display


def as_api_error(exc):
    """Turn a rules-layer ValidationError into a 400 with its code."""
    return serializers.ValidationError({
        "detail": exc.messages[0],
        "code": exc.code or "invalid",
    })


# =========================================================
# SPACE SERIALIZER
# Read by everyone, written by admins
# =========================================================
class SpaceSerializer(serializers.ModelSerializer):
    resources = serializers.ListField(
        child=serializers.CharField(allow_blank=True),
        required=False
    )
    price_per_hour = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=0
    )
    capacity = serializers.IntegerField(min_value=1)

    class Meta:
        model = Space
        fields = (
            "id",
            "name",
            "description",
            "capacity",
            "price_per_hour",
            "resources",
            "image_url",
            "is_active",
            "created_at",
        )
        read_only_fields = ("created_at",)

    def validate_resources(self, value):
        return normalize_resources(value)


class SpaceBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Space
        fields = ("id", "name", "capacity", "resources")


class SpaceImageUploadSerializer(serializers.Serializer):
    image = serializers.ImageField()


# =========================================================
# SPACE LIST FILTERS (?search=&min_capacity=...)
# =========================================================
class SpaceFilterSerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True)
    min_capacity = serializers.IntegerField(required=False, min_value=0)
    max_capacity = serializers.IntegerField(required=False, min_value=0)
    min_price = serializers.DecimalField(required=False, max_digits=10, decimal_places=2)
    max_price = serializers.DecimalField(required=False, max_digits=10, decimal_places=2)
    resource = serializers.CharField(required=False, allow_blank=True)

    def validate(self, data):
        if (
            data.get("min_capacity") is not None
            and data.get("max_capacity") is not None
            and data["min_capacity"] > data["max_capacity"]
        ):
            raise serializers.ValidationError("min_capacity cannot exceed max_capacity")
        if (
            data.get("min_price") is not None
            and data.get("max_price") is not None
            and data["min_price"] > data["max_price"]
        ):
            raise serializers.ValidationError("min_price cannot exceed max_price")
        return data


# =========================================================
# BOOKING READ SERIALIZER
# =========================================================
class BookingUserSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    full_name = serializers.CharField()
    email = serializers.EmailField()


class BookingSerializer(serializers.ModelSerializer):
    space = SpaceBriefSerializer(read_only=True)
    user = BookingUserSerializer(read_only=True)
    status_display = serializers.SerializerMethodField()
    duration_hours = serializers.IntegerField(read_only=True)
    can_cancel = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = (
            "id",
            "space",
            "user",
            "start_datetime",
            "end_datetime",
            "duration_hours",
            "total_price",
            "status",
            "status_display",
            "notes",
            "can_cancel",
            "created_at",
        )
        read_only_fields = fields

    def get_status_display(self, obj):
        return display(obj.status)

    def get_can_cancel(self, obj):
        return service.can_cancel(obj, now=self.context.get("now"))


# =========================================================
# BOOKING CREATION (FORM SUBMISSION)
# =========================================================
class BookingCreateSerializer(serializers.Serializer):
    space_id = serializers.PrimaryKeyRelatedField(
        queryset=Space.objects.filter(is_active=True),
        source="space"
    )
    date = serializers.DateField(required=False, allow_null=True)
    start_hour = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=23)
    end_hour = serializers.IntegerField(required=False, allow_null=True, min_value=1, max_value=24)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate(self, data):
        start_hour = data.get("start_hour")
        end_hour = data.get("end_hour")

        try:
            validate_selection(data.get("date"), start_hour, end_hour)
        except DjangoValidationError as exc:
            raise as_api_error(exc)

        # Only whole slots inside opening hours can be booked
        if start_hour < get_rule("OPENING_HOUR") or end_hour > get_rule("CLOSING_HOUR"):
            raise serializers.ValidationError({
                "detail": (
                    f"Bookings must fall between {get_rule('OPENING_HOUR'):02d}:00 "
                    f"and {get_rule('CLOSING_HOUR'):02d}:00."
                ),
                "code": "outside_opening_hours",
            })

        return data

    def create(self, validated_data):
        ctx = ActorContext.from_request(self.context["request"])

        try:
            return service.create_booking(
                ctx,
                validated_data["space"],
                validated_data["date"],
                validated_data["start_hour"],
                validated_data["end_hour"],
                notes=validated_data.get("notes"),
            )
        except DjangoValidationError as exc:
            raise as_api_error(exc)


# =========================================================
# PAYMENT CONFIRMATION
# =========================================================
class BookingPaySerializer(serializers.Serializer):
    payment_method = serializers.ChoiceField(choices=Payment.PAYMENT_METHOD_CHOICES)
    transaction_ref = serializers.CharField(required=False, max_length=100)


# =========================================================
# ADMIN STATUS CHANGE
# =========================================================
class BookingStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=BookingStatus.choices)


class AdminBookingFilterSerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(
        choices=[("all", "All")] + list(BookingStatus.choices),
        required=False
    )
    date = serializers.DateField(required=False)
