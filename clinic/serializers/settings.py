from rest_framework import serializers

from clinic.tables.state import PAGE_SIZE_CHOICES


class UserSettingsSerializer(serializers.Serializer):
    theme = serializers.ChoiceField(choices=['light', 'dark', 'system'], required=False)
    language = serializers.CharField(min_length=2, max_length=10, required=False)
    notifications = serializers.BooleanField(required=False)
    autoSave = serializers.BooleanField(required=False)
    itemsPerPage = serializers.ChoiceField(choices=list(PAGE_SIZE_CHOICES), required=False)
    dateFormat = serializers.CharField(max_length=20, required=False)
    currency = serializers.CharField(min_length=1, max_length=10, required=False)
