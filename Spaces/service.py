import logging
import uuid
from datetime import timedelta

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.exceptions import ValidationError as APIValidationError

from slots.constants import get_rule
from slots.services import (
    Interval,
    calculate_total_price,
    day_window,
    local_datetime,
    validate_selection,
)

from .exceptions import CancellationWindowClosed, SlotAlreadyBooked
from .models import Booking, Payment, Space
from .status import ACTIVE_STATUSES, BookingStatus, ensure_transition, is_terminal

logger = logging.getLogger(__name__)


def _require_admin(ctx):
    if not ctx.can_administer:
        raise PermissionDenied("Only administrators can perform this action.")


def _require_owner(ctx, booking):
    if not ctx.owns(booking):
        raise PermissionDenied("You can only manage your own bookings.")


# =========================
# SPACES
# =========================

def list_spaces(active_only=True, search=None, min_capacity=None, max_capacity=None,
                min_price=None, max_price=None, resource=None):
    qs = Space.objects.all()

    if active_only:
        qs = qs.filter(is_active=True)
    if search:
        qs = qs.filter(Q(name__icontains=search) | Q(description__icontains=search))
    if min_capacity is not None:
        qs = qs.filter(capacity__gte=min_capacity)
    if max_capacity is not None:
        qs = qs.filter(capacity__lte=max_capacity)
    if min_price is not None:
        qs = qs.filter(price_per_hour__gte=min_price)
    if max_price is not None:
        qs = qs.filter(price_per_hour__lte=max_price)

    spaces = list(qs)

    # JSON containment is not portable across backends; tags are few
    if resource:
        spaces = [s for s in spaces if resource in s.resources]

    return spaces


def create_space(ctx, **fields):
    _require_admin(ctx)

    space = Space(**fields)
    space.full_clean()
    space.save()

    logger.info(f"Space {space.id} '{space.name}' created by user {ctx.user_id}")
    return space


def update_space(ctx, space, **fields):
    _require_admin(ctx)

    for attr, value in fields.items():
        setattr(space, attr, value)
    space.full_clean()
    space.save()

    logger.info(f"Space {space.id} updated by user {ctx.user_id}: {sorted(fields)}")
    return space


def delete_space(ctx, space):
    _require_admin(ctx)

    space_id = space.id
    space.delete()

    logger.info(f"Space {space_id} deleted by user {ctx.user_id}")


# =========================
# AVAILABILITY
# =========================

def list_bookings(space_id, range_start, range_end, statuses=ACTIVE_STATUSES):
    """
    Intervals of bookings on a space whose start falls inside
    [range_start, range_end].
    """
    rows = (
        Booking.objects
        .filter(
            space_id=space_id,
            status__in=statuses,
            start_datetime__gte=range_start,
            start_datetime__lte=range_end,
        )
        .order_by("start_datetime")
        .values_list("start_datetime", "end_datetime")
    )
    return [Interval(start, end) for start, end in rows]


def bookings_for_date(space_id, booking_date):
    day_start, day_end = day_window(booking_date)
    return list_bookings(space_id, day_start, day_end)


# =========================
# BOOKING CREATION
# =========================

def create_booking(ctx, space, booking_date, start_hour, end_hour, notes=None, now=None):
    """
    Validate the selection and insert a pending booking.

    The overlap check and the insert run in one transaction with the space
    row locked, so two requests for the same hours cannot both succeed.
    """
    validate_selection(booking_date, start_hour, end_hour, now=now)

    start = local_datetime(booking_date, start_hour)
    end = local_datetime(booking_date, end_hour)

    with transaction.atomic():
        locked = Space.objects.select_for_update().filter(pk=space.pk).first()

        if locked is None:
            raise NotFound("Space not found")
        if not locked.is_active:
            raise ValidationError("This space is not available for booking.", code="inactive_space")

        conflict = Booking.objects.filter(
            space=locked,
            status__in=ACTIVE_STATUSES,
            start_datetime__lt=end,
            end_datetime__gt=start,
        ).exists()

        if conflict:
            logger.warning(
                f"Booking rejected: space {locked.id} {start:%Y-%m-%d %H:%M}-{end:%H:%M} "
                f"already taken (user {ctx.user_id})"
            )
            raise SlotAlreadyBooked()

        booking = Booking.objects.create(
            user=ctx.user,
            space=locked,
            start_datetime=start,
            end_datetime=end,
            total_price=calculate_total_price(start_hour, end_hour, locked.price_per_hour),
            notes=notes or None,
            status=BookingStatus.PENDING,
        )

    logger.info(
        f"Booking {booking.id} created: space {locked.id} "
        f"{start:%Y-%m-%d %H:%M}-{end:%H:%M} by user {ctx.user_id}"
    )
    return booking


# =========================
# USER LIFECYCLE ACTIONS
# =========================

def confirm_payment(ctx, booking, payment_method, transaction_ref=None):
    """
    Payment confirmation: pending -> confirmed, recording the payment.
    Replaying a known transaction reference for the same booking is a no-op.
    """
    _require_owner(ctx, booking)

    try:
        with transaction.atomic():
            locked = Booking.objects.select_for_update().get(pk=booking.pk)

            replayed = _replayed_payment(booking, transaction_ref)
            if replayed is not None:
                return replayed

            ensure_transition(locked.status, BookingStatus.CONFIRMED)

            locked.status = BookingStatus.CONFIRMED
            locked.save(update_fields=["status"])

            Payment.objects.create(
                booking=locked,
                payment_method=payment_method,
                transaction_ref=transaction_ref or f"PAY-{uuid.uuid4().hex[:16].upper()}",
                amount_paid=locked.total_price,
            )
    except IntegrityError:
        # Same reference committed concurrently by another request
        replayed = _replayed_payment(booking, transaction_ref)
        if replayed is None:
            raise
        return replayed

    logger.info(f"Booking {locked.id} confirmed by payment ({payment_method})")
    return locked


def _replayed_payment(booking, transaction_ref):
    """
    The booking already paid with ``transaction_ref``, or None when the
    reference is new. A reference owned by another booking is rejected.
    """
    if not transaction_ref:
        return None

    existing = Payment.objects.filter(transaction_ref=transaction_ref).first()
    if existing is None:
        return None
    if existing.booking_id != booking.id:
        raise APIValidationError("This transaction reference was already used")

    logger.info(f"Payment {transaction_ref} already processed for booking {booking.id}")
    return existing.booking


def can_cancel(booking, now=None):
    """
    Users may cancel a non-terminal booking up to the cancellation window
    before it starts.
    """
    if is_terminal(booking.status):
        return False
    now = now or timezone.now()
    window = timedelta(hours=get_rule("CANCELLATION_WINDOW_HOURS"))
    return booking.start_datetime - now > window


def cancel_booking(ctx, booking, now=None):
    _require_owner(ctx, booking)

    ensure_transition(booking.status, BookingStatus.CANCELLED)
    if not can_cancel(booking, now=now):
        raise CancellationWindowClosed(
            "Bookings can only be cancelled more than "
            f"{get_rule('CANCELLATION_WINDOW_HOURS')} hours before they start"
        )

    booking.status = BookingStatus.CANCELLED
    booking.save(update_fields=["status"])

    logger.info(f"Booking {booking.id} cancelled by user {ctx.user_id}")
    return booking


def categorize_bookings(bookings, now=None):
    """
    Group a user's bookings the way the "my bookings" screen shows them.
    A booking later today is both upcoming and today.
    """
    now = now or timezone.now()
    today = timezone.localtime(now).date()

    upcoming, today_list, past = [], [], []
    for booking in bookings:
        active = booking.status in ACTIVE_STATUSES
        if active and booking.start_datetime > now:
            upcoming.append(booking)
        if active and timezone.localtime(booking.start_datetime).date() == today:
            today_list.append(booking)
        if booking.end_datetime < now or not active:
            past.append(booking)

    return {"upcoming": upcoming, "today": today_list, "past": past}


# =========================
# ADMIN OVERRIDE PATH
# =========================

def admin_set_status(ctx, booking, new_status):
    """
    Privileged status change. Only the lifecycle graph applies; conflict,
    duration, notice and cancellation-window rules are not re-checked.
    """
    _require_admin(ctx)

    old_status = booking.status
    ensure_transition(old_status, new_status)

    booking.status = new_status
    booking.save(update_fields=["status"])

    logger.warning(
        f"Admin override: booking {booking.id} {old_status} -> {new_status} "
        f"by user {ctx.user_id}"
    )
    return booking


def update_booking_status(ctx, booking_id, new_status):
    booking = Booking.objects.filter(pk=booking_id).first()
    if booking is None:
        raise NotFound("Booking not found")
    return admin_set_status(ctx, booking, new_status)


def list_all_bookings(search=None, status=None, on_date=None):
    qs = Booking.objects.select_related("user", "space").order_by("-created_at")

    if search:
        qs = qs.filter(
            Q(user__full_name__icontains=search)
            | Q(user__email__icontains=search)
            | Q(space__name__icontains=search)
        )
    if status and status != "all":
        qs = qs.filter(status=status)
    if on_date:
        day_start, day_end = day_window(on_date)
        qs = qs.filter(start_datetime__gte=day_start, start_datetime__lte=day_end)

    return qs
