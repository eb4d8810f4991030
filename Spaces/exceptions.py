from rest_framework.exceptions import APIException
from rest_framework import status


class SlotAlreadyBooked(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This time slot is no longer available"
    default_code = "slot_already_booked"


class InvalidStatusTransition(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This status change is not allowed"
    default_code = "invalid_status_transition"


class CancellationWindowClosed(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Bookings can only be cancelled more than 2 hours before they start"
    default_code = "cancellation_window_closed"


class StorageError(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "File storage is currently unavailable"
    default_code = "storage_error"
