from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (
    AdminBookingListView,
    AdminBookingStatusView,
    AdminSpaceViewSet,
    BookingCancelView,
    BookingCreateView,
    BookingPayView,
    MyBookingsView,
    SpaceDetailView,
    SpaceListView,
)

router = DefaultRouter()
router.register("spaces", AdminSpaceViewSet, basename="admin-space")

urlpatterns = [
    path("spaces/", SpaceListView.as_view(), name="space-list"),
    path("spaces/<int:pk>/", SpaceDetailView.as_view(), name="space-detail"),

    path("bookings/", BookingCreateView.as_view(), name="booking-create"),
    path("bookings/mine/", MyBookingsView.as_view(), name="booking-mine"),
    path("bookings/<int:pk>/pay/", BookingPayView.as_view(), name="booking-pay"),
    path("bookings/<int:pk>/cancel/", BookingCancelView.as_view(), name="booking-cancel"),

    path("admin/", include(router.urls)),
    path("admin/bookings/", AdminBookingListView.as_view(), name="admin-booking-list"),
    path(
        "admin/bookings/<int:pk>/status/",
        AdminBookingStatusView.as_view(),
        name="admin-booking-status"
    ),
]
