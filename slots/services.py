"""
Slot availability and conflict checking for the booking form.

Everything here works on plain values (dates, hours, datetimes and
objects exposing ``start`` / ``end``) so it can run without the ORM.
"""
from collections import namedtuple
from datetime import datetime, time, timedelta
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.utils import timezone

from . import constants
from .constants import get_rule


Slot = namedtuple("Slot", ["hour", "available"])
Interval = namedtuple("Interval", ["start", "end"])


def format_hour(hour):
    return f"{hour:02d}:00"


def local_datetime(slot_date, hour):
    """
    Aware datetime for ``hour``:00 local wall-clock time on ``slot_date``.
    Hour 24 is accepted and rolls over to the next day.
    """
    naive = datetime.combine(slot_date, time(0)) + timedelta(hours=hour)
    return timezone.make_aware(naive, timezone.get_current_timezone())


def day_window(slot_date):
    """Start and end of the local calendar day, both inclusive."""
    day_start = local_datetime(slot_date, 0)
    day_end = day_start + timedelta(days=1) - timedelta(microseconds=1)
    return day_start, day_end


def overlaps(a_start, a_end, b_start, b_end):
    # Half-open intervals: touching edges do not overlap
    return a_start < b_end and a_end > b_start


def is_conflicted(slot_start, slot_end, bookings):
    return any(
        overlaps(slot_start, slot_end, booking.start, booking.end)
        for booking in bookings
    )


def generate_slots(slot_date, existing_bookings):
    """
    One Slot per opening hour of ``slot_date``. A slot is unavailable when
    its [hour:00, hour+1:00) interval overlaps any existing booking.
    """
    bookings = [Interval(b.start, b.end) for b in existing_bookings]

    slots = []
    for hour in range(get_rule("OPENING_HOUR"), get_rule("CLOSING_HOUR")):
        slot_start = local_datetime(slot_date, hour)
        slot_end = slot_start + timedelta(hours=1)
        slots.append(
            Slot(hour=hour, available=not is_conflicted(slot_start, slot_end, bookings))
        )
    return slots


def start_options(slots):
    last_start = get_rule("CLOSING_HOUR") - 1
    return [slot for slot in slots if slot.available and slot.hour < last_start]


def end_options(slots, start_hour):
    """
    Hours that can close a booking opened at ``start_hour``.

    An end hour is offered only while every slot between the start and it
    is free, so the first taken slot caps the list. The closing hour has no
    slot of its own and is offered once the last slot is reachable. Ends
    past the maximum duration are never offered.
    """
    by_hour = {slot.hour: slot for slot in slots}
    if start_hour not in by_hour or not by_hour[start_hour].available:
        return []

    last_end = min(get_rule("CLOSING_HOUR"), start_hour + get_rule("MAX_DURATION_HOURS"))

    hours = []
    for end_hour in range(start_hour + 1, last_end + 1):
        previous = by_hour.get(end_hour - 1)
        if previous is None or not previous.available:
            break
        hours.append(end_hour)
    return hours


def validate_selection(slot_date, start_hour, end_hour, now=None):
    """
    Check a start/end selection before submission. The first broken rule
    raises a ValidationError carrying one of the codes in slots.constants.
    """
    if slot_date is None:
        raise ValidationError(
            "Select a date for the booking.",
            code=constants.DATE_REQUIRED,
        )

    if start_hour is None or end_hour is None:
        raise ValidationError(
            "Select both a start and an end time.",
            code=constants.TIME_REQUIRED,
        )

    if start_hour >= end_hour:
        raise ValidationError(
            "The end time must be after the start time.",
            code=constants.INVALID_RANGE,
        )

    max_hours = get_rule("MAX_DURATION_HOURS")
    if end_hour - start_hour > max_hours:
        raise ValidationError(
            f"A booking can last at most {max_hours} hours.",
            code=constants.MAX_DURATION,
        )

    now = now or timezone.now()
    notice = timedelta(hours=get_rule("ADVANCE_NOTICE_HOURS"))
    if local_datetime(slot_date, start_hour) < now + notice:
        raise ValidationError(
            "Bookings must be made at least "
            f"{get_rule('ADVANCE_NOTICE_HOURS')} hour(s) in advance.",
            code=constants.ADVANCE_NOTICE,
        )


def calculate_total_price(start_hour, end_hour, hourly_price):
    hours = end_hour - start_hour
    return (Decimal(hours) * Decimal(str(hourly_price))).quantize(Decimal("0.01"))


def build_availability(slot_date, existing_bookings, hourly_price, start_hour=None):
    """
    Response payload for the availability endpoint: every slot of the day,
    the selectable start hours and, when a start is given, the end hours.
    """
    slots = generate_slots(slot_date, existing_bookings)

    data = {
        "date": slot_date.isoformat(),
        "price_per_hour": f"{Decimal(str(hourly_price)):.2f}",
        "slots": [
            {
                "hour": slot.hour,
                "time_label": format_hour(slot.hour),
                "is_available": slot.available,
            }
            for slot in slots
        ],
        "start_options": [slot.hour for slot in start_options(slots)],
    }

    if start_hour is not None:
        data["selected_start"] = start_hour
        data["end_options"] = [
            {
                "hour": end_hour,
                "time_label": format_hour(end_hour),
                "total_price": f"{calculate_total_price(start_hour, end_hour, hourly_price):.2f}",
            }
            for end_hour in end_options(slots, start_hour)
        ]

    return data
