# slots/constants.py
from django.conf import settings


class BookingRules:
    # Slots are generated for OPENING_HOUR..CLOSING_HOUR-1; CLOSING_HOUR is
    # only ever an end boundary.
    OPENING_HOUR = 8
    CLOSING_HOUR = 22

    MAX_DURATION_HOURS = 8
    ADVANCE_NOTICE_HOURS = 1
    CANCELLATION_WINDOW_HOURS = 2

    DEFAULTS = {
        "OPENING_HOUR": OPENING_HOUR,
        "CLOSING_HOUR": CLOSING_HOUR,
        "MAX_DURATION_HOURS": MAX_DURATION_HOURS,
        "ADVANCE_NOTICE_HOURS": ADVANCE_NOTICE_HOURS,
        "CANCELLATION_WINDOW_HOURS": CANCELLATION_WINDOW_HOURS,
    }


def get_rule(name):
    """
    Business policy value, overridable per deployment through
    settings.BOOKING_RULES.
    """
    overrides = getattr(settings, "BOOKING_RULES", None) or {}
    return overrides.get(name, BookingRules.DEFAULTS[name])


# Error codes raised by slots.services.validate_selection
DATE_REQUIRED = "date_required"
TIME_REQUIRED = "time_required"
INVALID_RANGE = "invalid_range"
MAX_DURATION = "max_duration"
ADVANCE_NOTICE = "advance_notice"
