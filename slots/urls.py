from django.urls import path
from .views import SpaceAvailabilityView

urlpatterns = [
    path(
        "spaces/<int:space_id>/availability/",
        SpaceAvailabilityView.as_view(),
        name="space-availability"
    ),
]
