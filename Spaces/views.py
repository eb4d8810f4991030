from django.db.models import Q
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.generics import RetrieveAPIView
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from Accounts.context import ActorContext
from Accounts.permissions import IsAdminRole

from . import service
from .models import Booking, Space
from .serializers import (
    AdminBookingFilterSerializer,
    BookingCreateSerializer,
    BookingPaySerializer,
    BookingSerializer,
    BookingStatusUpdateSerializer,
    SpaceFilterSerializer,
    SpaceImageUploadSerializer,
    SpaceSerializer,
)
from .utils import SPACE_IMAGES_BUCKET, discard_replaced_file, storage_path_from_url, upload_file


# -------------------------------------------------------------------
# SPACE LIST (ACTIVE SPACES, FILTERABLE)
# -------------------------------------------------------------------
class SpaceListView(APIView):
    """
    Public API
    Lists active spaces; supports search, capacity, price and resource filters
    """
    permission_classes = [AllowAny]

    def get(self, request):
        filters = SpaceFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        spaces = service.list_spaces(active_only=True, **filters.validated_data)
        serializer = SpaceSerializer(spaces, many=True)

        return Response({
            "status": "success",
            "count": len(spaces),
            "data": serializer.data,
        }, status=status.HTTP_200_OK)


# -------------------------------------------------------------------
# SPACE DETAIL (SINGLE ACTIVE SPACE)
# -------------------------------------------------------------------
class SpaceDetailView(RetrieveAPIView):
    serializer_class = SpaceSerializer
    permission_classes = [AllowAny]

    def get_queryset(self):
        # Admins can open inactive spaces too
        if IsAdminRole().has_permission(self.request, self):
            return Space.objects.all()
        return Space.objects.filter(is_active=True)


# -------------------------------------------------------------------
# BOOKING REQUEST (FORM SUBMISSION)
# -------------------------------------------------------------------
class BookingCreateView(APIView):
    """
    Authenticated API
    Re-validates the selection and creates a pending booking
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = BookingCreateSerializer(
            data=request.data,
            context={"request": request}
        )
        serializer.is_valid(raise_exception=True)
        booking = serializer.save()

        return Response({
            "status": "success",
            "message": "Booking requested and awaiting confirmation",
            "data": BookingSerializer(booking).data,
        }, status=status.HTTP_201_CREATED)


# -------------------------------------------------------------------
# MY BOOKINGS (UPCOMING / TODAY / PAST)
# -------------------------------------------------------------------
class MyBookingsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        now = timezone.now()
        bookings = (
            Booking.objects
            .filter(user=request.user)
            .select_related("space", "user")
            .order_by("-start_datetime")
        )
        groups = service.categorize_bookings(bookings, now=now)
        context = {"now": now}

        return Response({
            "status": "success",
            "data": {
                name: BookingSerializer(items, many=True, context=context).data
                for name, items in groups.items()
            },
        }, status=status.HTTP_200_OK)


# -------------------------------------------------------------------
# PAYMENT CONFIRMATION (PENDING -> CONFIRMED)
# -------------------------------------------------------------------
class BookingPayView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        booking = get_object_or_404(Booking, pk=pk, user=request.user)

        serializer = BookingPaySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        booking = service.confirm_payment(
            ActorContext.from_request(request),
            booking,
            serializer.validated_data["payment_method"],
            serializer.validated_data.get("transaction_ref"),
        )

        return Response({
            "status": "success",
            "message": "Payment processed and booking confirmed",
            "data": BookingSerializer(booking).data,
        }, status=status.HTTP_200_OK)


# -------------------------------------------------------------------
# USER CANCELLATION
# -------------------------------------------------------------------
class BookingCancelView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        booking = get_object_or_404(Booking, pk=pk, user=request.user)

        booking = service.cancel_booking(ActorContext.from_request(request), booking)

        return Response({
            "status": "success",
            "message": "Booking cancelled",
            "data": BookingSerializer(booking).data,
        }, status=status.HTTP_200_OK)


# -------------------------------------------------------------------
# ADMIN: SPACE MANAGEMENT
# -------------------------------------------------------------------
class AdminSpaceViewSet(viewsets.ModelViewSet):
    """
    Admin CRUD for spaces, including inactive ones
    """
    serializer_class = SpaceSerializer
    permission_classes = [IsAdminRole]

    def get_queryset(self):
        qs = Space.objects.all()
        search = self.request.query_params.get("search")
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(description__icontains=search))
        return qs

    def perform_create(self, serializer):
        ctx = ActorContext.from_request(self.request)
        serializer.instance = service.create_space(ctx, **serializer.validated_data)

    def perform_update(self, serializer):
        ctx = ActorContext.from_request(self.request)
        serializer.instance = service.update_space(
            ctx, serializer.instance, **serializer.validated_data
        )

    def perform_destroy(self, instance):
        service.delete_space(ActorContext.from_request(self.request), instance)

    @action(detail=True, methods=["post"], url_path="image")
    def upload_image(self, request, pk=None):
        space = self.get_object()

        serializer = SpaceImageUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        previous = storage_path_from_url(space.image_url)
        url = request.build_absolute_uri(
            upload_file(SPACE_IMAGES_BUCKET, str(space.id), serializer.validated_data["image"])
        )
        space = service.update_space(
            ActorContext.from_request(request), space, image_url=url
        )
        if previous:
            discard_replaced_file(SPACE_IMAGES_BUCKET, previous)

        return Response({
            "status": "success",
            "space_id": space.id,
            "image_url": space.image_url,
        })


# -------------------------------------------------------------------
# ADMIN: ALL BOOKINGS
# -------------------------------------------------------------------
class AdminBookingListView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        filters = AdminBookingFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        bookings = service.list_all_bookings(
            search=filters.validated_data.get("search"),
            status=filters.validated_data.get("status"),
            on_date=filters.validated_data.get("date"),
        )
        serializer = BookingSerializer(bookings, many=True)

        return Response({
            "status": "success",
            "count": len(serializer.data),
            "data": serializer.data,
        })


# -------------------------------------------------------------------
# ADMIN: STATUS OVERRIDE
# -------------------------------------------------------------------
class AdminBookingStatusView(APIView):
    """
    Privileged lifecycle change; skips booking-form rules
    """
    permission_classes = [IsAdminRole]

    def patch(self, request, pk):
        serializer = BookingStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        booking = service.update_booking_status(
            ActorContext.from_request(request),
            pk,
            serializer.validated_data["status"],
        )

        return Response({
            "status": "success",
            "message": "Booking status updated",
            "data": BookingSerializer(booking).data,
        })
