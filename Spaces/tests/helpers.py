import io
from datetime import timedelta
from decimal import Decimal

from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone
from PIL import Image

from Accounts.models import User
from Spaces.models import Booking, Space
from slots.services import local_datetime


def make_user(email="ana@example.com", full_name="Ana Souza", role=User.ROLE_USER, password="secret123"):
    return User.objects.create_user(
        email=email,
        password=password,
        full_name=full_name,
        role=role,
    )


def make_admin(email="admin@example.com", full_name="Admin Silva"):
    return make_user(email=email, full_name=full_name, role=User.ROLE_ADMIN)


def make_space(name="Meeting Room A", capacity=8, price="50.00", resources=None, is_active=True):
    return Space.objects.create(
        name=name,
        description=f"{name} on the second floor",
        capacity=capacity,
        price_per_hour=Decimal(price),
        resources=resources if resources is not None else ["wifi", "tv"],
        is_active=is_active,
    )


def future_day(days=3):
    return timezone.localdate() + timedelta(days=days)


def make_booking(user, space, day, start_hour, end_hour, status="pending"):
    return Booking.objects.create(
        user=user,
        space=space,
        start_datetime=local_datetime(day, start_hour),
        end_datetime=local_datetime(day, end_hour),
        total_price=(end_hour - start_hour) * space.price_per_hour,
        status=status,
    )


def make_booking_at(user, space, start, hours=1, status="pending"):
    return Booking.objects.create(
        user=user,
        space=space,
        start_datetime=start,
        end_datetime=start + timedelta(hours=hours),
        total_price=hours * space.price_per_hour,
        status=status,
    )


def make_image(name="photo.png"):
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), "blue").save(buffer, format="PNG")
    return SimpleUploadedFile(name, buffer.getvalue(), content_type="image/png")
