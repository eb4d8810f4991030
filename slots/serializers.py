# slots/serializers.py
from rest_framework import serializers

from .constants import get_rule


class AvailabilityQuerySerializer(serializers.Serializer):
    date = serializers.DateField()
    start = serializers.IntegerField(required=False)

    def validate_start(self, value):
        if value < get_rule("OPENING_HOUR") or value >= get_rule("CLOSING_HOUR"):
            raise serializers.ValidationError("Start hour outside opening hours")
        return value
