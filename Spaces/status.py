# Spaces/status.py
from django.db import models

from .exceptions import InvalidStatusTransition


class BookingStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


# Single display table: every serializer reads label/colour from here
STATUS_DISPLAY = {
    BookingStatus.PENDING: {"label": "Pending", "color": "yellow", "variant": "secondary"},
    BookingStatus.CONFIRMED: {"label": "Confirmed", "color": "green", "variant": "default"},
    BookingStatus.COMPLETED: {"label": "Completed", "color": "gray", "variant": "outline"},
    BookingStatus.CANCELLED: {"label": "Cancelled", "color": "red", "variant": "destructive"},
}

TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
}

# Statuses that hold their time range on the space
ACTIVE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)
TERMINAL_STATUSES = (BookingStatus.COMPLETED, BookingStatus.CANCELLED)


def display(status):
    return {"value": str(status), **STATUS_DISPLAY[BookingStatus(status)]}


def can_transition(current, new):
    return BookingStatus(new) in TRANSITIONS[BookingStatus(current)]


def ensure_transition(current, new):
    if not can_transition(current, new):
        raise InvalidStatusTransition(
            f"Cannot change booking status from '{current}' to '{new}'"
        )


def is_terminal(status):
    return BookingStatus(status) in TERMINAL_STATUSES
