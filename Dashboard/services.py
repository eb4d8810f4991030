from datetime import timedelta
from decimal import Decimal

from django.db.models import Count, Sum
from django.utils import timezone

from Accounts.models import User
from Spaces.models import Booking, Space
from Spaces.status import BookingStatus, display


def _month_bounds(now):
    local = timezone.localtime(now)
    month_start = local.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if month_start.month == 12:
        next_month = month_start.replace(year=month_start.year + 1, month=1)
    else:
        next_month = month_start.replace(month=month_start.month + 1)
    return month_start, next_month


class AdminReportService:
    """
    All report queries live here.
    Views should NOT touch the database directly.
    """

    @staticmethod
    def get_profile(admin_user):
        return {
            "id": admin_user.id,
            "name": admin_user.full_name or admin_user.email,
            "email": admin_user.email,
            "role": admin_user.get_role_display(),
            "avatar_url": admin_user.avatar_url or None,
        }

    @staticmethod
    def get_totals():
        # Revenue is the sum of every booking's price, whatever its status
        revenue = Booking.objects.aggregate(total=Sum("total_price"))["total"] or Decimal("0")

        return {
            "total_bookings": Booking.objects.count(),
            "total_revenue": revenue,
            "total_users": User.objects.count(),
            "total_spaces": Space.objects.count(),
        }

    @staticmethod
    def get_monthly_revenue(now):
        month_start, next_month = _month_bounds(now)
        return (
            Booking.objects
            .filter(created_at__gte=month_start, created_at__lt=next_month)
            .aggregate(total=Sum("total_price"))["total"]
            or Decimal("0")
        )

    @staticmethod
    def get_status_breakdown():
        counts = dict(
            Booking.objects
            .order_by()
            .values("status")
            .annotate(total=Count("id"))
            .values_list("status", "total")
        )
        total = sum(counts.values())

        breakdown = []
        for status in BookingStatus:
            count = counts.get(status.value, 0)
            breakdown.append({
                **display(status),
                "count": count,
                "percent": round(count * 100 / total, 1) if total else 0.0,
            })
        return breakdown

    @staticmethod
    def get_recent_bookings(now, days=7, limit=5):
        since = now - timedelta(days=days)
        bookings = (
            Booking.objects
            .filter(created_at__gte=since)
            .select_related("space", "user")
            .order_by("-created_at")
        )

        recent = []
        for booking in bookings[:limit]:
            recent.append({
                "id": booking.id,
                "space": booking.space.name,
                "user": booking.user.full_name or booking.user.email,
                "start_datetime": booking.start_datetime,
                "end_datetime": booking.end_datetime,
                "total_price": booking.total_price,
                "status": display(booking.status),
            })

        return {"count": bookings.count(), "items": recent}


def build_report(admin_user, now=None):
    now = now or timezone.now()
    totals = AdminReportService.get_totals()

    return {
        "profile": AdminReportService.get_profile(admin_user),
        "totals": totals,
        "monthly_revenue": AdminReportService.get_monthly_revenue(now),
        "status_breakdown": AdminReportService.get_status_breakdown(),
        "recent_bookings": AdminReportService.get_recent_bookings(now),
    }
