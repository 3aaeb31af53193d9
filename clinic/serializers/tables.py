from rest_framework import serializers


class TableQuerySerializer(serializers.Serializer):
    """Query parameters shared by every table endpoint.

    ``sortDir``, ``page`` and ``pageSize`` are taken as plain strings:
    malformed or out of range values fall back to the view state
    defaults instead of failing the request.
    """
    search = serializers.CharField(required=False, allow_blank=True, max_length=200, trim_whitespace=False)
    sortKey = serializers.CharField(required=False, allow_blank=True, max_length=64)
    sortDir = serializers.CharField(required=False, allow_blank=True)
    page = serializers.CharField(required=False, allow_blank=True)
    pageSize = serializers.CharField(required=False, allow_blank=True)


class ActivityQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(required=False, min_value=1, default=10)
