# Dashboard/urls.py
from django.urls import path
from .views import AdminReportView

urlpatterns = [
    path("admin/reports/", AdminReportView.as_view(), name="admin-reports"),
]
