from rest_framework import serializers

from clinic.models import HealthCheckRequest
from clinic.serializers.text import clean_text


class HealthCheckRequestSerializer(serializers.Serializer):
    agentName = serializers.CharField(max_length=150)
    employeeId = serializers.CharField(max_length=20)
    client = serializers.CharField(max_length=100)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255)

    def _required_text(self, v, message):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError(message)
        return v

    def validate_agentName(self, v):
        return self._required_text(v, 'Agent name is required')

    def validate_employeeId(self, v):
        return self._required_text(v, 'Employee ID is required').upper()

    def validate_client(self, v):
        return self._required_text(v, 'Client is required')

    def validate_reason(self, v):
        return clean_text(v)


class HealthCheckStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[
        c for c, _ in HealthCheckRequest.STATUS_CHOICES if c != HealthCheckRequest.STATUS_PENDING
    ])
