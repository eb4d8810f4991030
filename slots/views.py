from django.shortcuts import get_object_or_404
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny
from rest_framework import status

from Spaces.models import Space
from Spaces.service import bookings_for_date
from slots.serializers import AvailabilityQuerySerializer
from slots.services import build_availability


class SpaceAvailabilityView(APIView):
    """
    Public API
    Hourly slots for a space on a date, with selectable start and end hours
    """
    permission_classes = [AllowAny]

    def get(self, request, space_id):
        serializer = AvailabilityQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        selected_date = serializer.validated_data["date"]
        start_hour = serializer.validated_data.get("start")

        space = get_object_or_404(
            Space.objects.only("id", "name", "price_per_hour", "is_active"),
            id=space_id,
            is_active=True,
        )

        existing = bookings_for_date(space.id, selected_date)
        data = build_availability(
            selected_date,
            existing,
            space.price_per_hour,
            start_hour=start_hour,
        )
        data["space"] = {"id": space.id, "name": space.name}

        return Response({
            "status": "success",
            "data": data
        }, status=status.HTTP_200_OK)
