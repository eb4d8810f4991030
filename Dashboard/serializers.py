# Dashboard/serializers.py
from rest_framework import serializers


class AdminProfileSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    email = serializers.EmailField()
    role = serializers.CharField()
    avatar_url = serializers.CharField(allow_null=True)


class TotalsSerializer(serializers.Serializer):
    total_bookings = serializers.IntegerField()
    total_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_users = serializers.IntegerField()
    total_spaces = serializers.IntegerField()


class StatusBreakdownSerializer(serializers.Serializer):
    value = serializers.CharField()
    label = serializers.CharField()
    color = serializers.CharField()
    variant = serializers.CharField()
    count = serializers.IntegerField()
    percent = serializers.FloatField()


class RecentBookingSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    space = serializers.CharField()
    user = serializers.CharField()
    start_datetime = serializers.DateTimeField()
    end_datetime = serializers.DateTimeField()
    total_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    status = serializers.DictField()


class RecentBookingsModuleSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    items = RecentBookingSerializer(many=True)


class ReportSerializer(serializers.Serializer):
    profile = AdminProfileSerializer()
    totals = TotalsSerializer()
    monthly_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    status_breakdown = StatusBreakdownSerializer(many=True)
    recent_bookings = RecentBookingsModuleSerializer()
