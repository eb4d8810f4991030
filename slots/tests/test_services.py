from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from slots import constants
from slots.services import (
    Interval,
    build_availability,
    calculate_total_price,
    day_window,
    end_options,
    generate_slots,
    local_datetime,
    start_options,
    validate_selection,
)

DAY = date(2030, 5, 14)


def booked(start_hour, end_hour, day=DAY):
    return Interval(local_datetime(day, start_hour), local_datetime(day, end_hour))


def availability(slots):
    return {slot.hour: slot.available for slot in slots}


def test_generates_fourteen_hourly_slots_from_eight_to_twenty_one():
    slots = generate_slots(DAY, [])

    assert [slot.hour for slot in slots] == list(range(8, 22))
    assert all(slot.available for slot in slots)


def test_booking_blocks_the_hours_it_covers():
    slots = availability(generate_slots(DAY, [booked(10, 12)]))

    assert slots[10] is False
    assert slots[11] is False


def test_abutting_slots_stay_available():
    slots = availability(generate_slots(DAY, [booked(10, 12)]))

    assert slots[9] is True
    assert slots[12] is True


def test_exactly_matching_one_hour_booking_blocks_its_slot():
    slots = availability(generate_slots(DAY, [booked(14, 15)]))

    assert slots[14] is False
    assert slots[13] is True
    assert slots[15] is True


def test_slot_containing_a_short_booking_is_blocked():
    start = local_datetime(DAY, 16) + timedelta(minutes=15)
    short = Interval(start, start + timedelta(minutes=30))

    slots = availability(generate_slots(DAY, [short]))

    assert slots[16] is False
    assert slots[15] is True
    assert slots[17] is True


def test_bookings_on_other_days_do_not_conflict():
    other_day = booked(10, 12, day=DAY + timedelta(days=1))

    assert all(slot.available for slot in generate_slots(DAY, [other_day]))


def test_slot_unavailable_iff_it_overlaps_a_booking():
    bookings = [booked(9, 11), booked(15, 16), booked(19, 22)]
    slots = generate_slots(DAY, bookings)

    for slot in slots:
        slot_start = local_datetime(DAY, slot.hour)
        slot_end = slot_start + timedelta(hours=1)
        overlapping = any(
            slot_start < b.end and slot_end > b.start for b in bookings
        )
        assert slot.available is not overlapping


def test_recomputing_from_same_snapshot_is_identical():
    bookings = [booked(8, 10), booked(13, 14)]

    assert generate_slots(DAY, bookings) == generate_slots(DAY, bookings)


def test_start_options_exclude_last_slot_and_taken_hours():
    slots = generate_slots(DAY, [booked(12, 14)])
    hours = [slot.hour for slot in start_options(slots)]

    assert 21 not in hours
    assert 12 not in hours and 13 not in hours
    assert hours == [8, 9, 10, 11, 14, 15, 16, 17, 18, 19, 20]


def test_every_free_hour_before_closing_is_a_start_option():
    bookings = [booked(11, 13)]
    slots = generate_slots(DAY, bookings)
    offered = {slot.hour for slot in start_options(slots)}

    for hour in range(8, 21):
        slot_start = local_datetime(DAY, hour)
        free = not any(
            slot_start < b.end and slot_start + timedelta(hours=1) > b.start
            for b in bookings
        )
        if free:
            assert hour in offered


def test_end_options_run_to_closing_boundary():
    slots = generate_slots(DAY, [])

    assert end_options(slots, 14) == list(range(15, 23))
    assert end_options(slots, 20) == [21, 22]


def test_end_options_never_exceed_max_duration():
    slots = generate_slots(DAY, [])

    assert end_options(slots, 8) == list(range(9, 17))
    assert end_options(slots, 10)[-1] == 18


def test_end_options_follow_duration_override(settings):
    settings.BOOKING_RULES = {"MAX_DURATION_HOURS": 3}
    slots = generate_slots(DAY, [])

    assert end_options(slots, 10) == [11, 12, 13]


def test_end_options_stop_at_next_booking():
    slots = generate_slots(DAY, [booked(13, 15)])

    assert end_options(slots, 10) == [11, 12, 13]


def test_end_options_empty_for_taken_start():
    slots = generate_slots(DAY, [booked(13, 15)])

    assert end_options(slots, 13) == []


def _code(excinfo):
    return excinfo.value.code


def test_validation_requires_date():
    with pytest.raises(ValidationError) as excinfo:
        validate_selection(None, 10, 12)

    assert _code(excinfo) == constants.DATE_REQUIRED


@pytest.mark.parametrize("start_hour,end_hour", [(None, 12), (10, None), (None, None)])
def test_validation_requires_start_and_end(start_hour, end_hour):
    with pytest.raises(ValidationError) as excinfo:
        validate_selection(DAY, start_hour, end_hour)

    assert _code(excinfo) == constants.TIME_REQUIRED


@pytest.mark.parametrize("start_hour,end_hour", [(14, 12), (10, 10)])
def test_validation_rejects_end_not_after_start(start_hour, end_hour):
    now = local_datetime(DAY, 0) - timedelta(days=1)

    with pytest.raises(ValidationError) as excinfo:
        validate_selection(DAY, start_hour, end_hour, now=now)

    assert _code(excinfo) == constants.INVALID_RANGE


def test_validation_rejects_more_than_eight_hours():
    now = local_datetime(DAY, 0) - timedelta(days=1)

    with pytest.raises(ValidationError) as excinfo:
        validate_selection(DAY, 9, 18, now=now)

    assert _code(excinfo) == constants.MAX_DURATION


def test_eight_hour_booking_is_allowed():
    now = local_datetime(DAY, 0) - timedelta(days=1)

    validate_selection(DAY, 9, 17, now=now)


def test_validation_rejects_start_within_advance_notice():
    now = local_datetime(DAY, 9) - timedelta(minutes=30)

    with pytest.raises(ValidationError) as excinfo:
        validate_selection(DAY, 9, 11, now=now)

    assert _code(excinfo) == constants.ADVANCE_NOTICE


def test_start_exactly_one_hour_ahead_is_allowed():
    now = local_datetime(DAY, 9) - timedelta(hours=1)

    validate_selection(DAY, 9, 11, now=now)


def test_rules_can_be_overridden_from_settings(settings):
    settings.BOOKING_RULES = {"MAX_DURATION_HOURS": 4}
    now = local_datetime(DAY, 0) - timedelta(days=1)

    with pytest.raises(ValidationError) as excinfo:
        validate_selection(DAY, 10, 15, now=now)

    assert _code(excinfo) == constants.MAX_DURATION
    assert "4 hours" in excinfo.value.messages[0]


def test_total_price_is_hours_times_hourly_price():
    assert calculate_total_price(10, 13, 50) == Decimal("150.00")
    assert calculate_total_price(8, 9, Decimal("37.50")) == Decimal("37.50")


def test_day_window_covers_whole_local_day():
    day_start, day_end = day_window(DAY)

    assert day_start == local_datetime(DAY, 0)
    assert day_end == local_datetime(DAY, 24) - timedelta(microseconds=1)


def test_build_availability_payload():
    data = build_availability(DAY, [booked(13, 15)], Decimal("50.00"), start_hour=10)

    assert data["date"] == "2030-05-14"
    assert data["price_per_hour"] == "50.00"
    assert len(data["slots"]) == 14
    assert data["slots"][0] == {"hour": 8, "time_label": "08:00", "is_available": True}
    assert 13 not in data["start_options"]
    assert [opt["hour"] for opt in data["end_options"]] == [11, 12, 13]
    assert data["end_options"][-1]["total_price"] == "150.00"
