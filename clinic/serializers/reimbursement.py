from decimal import Decimal

from rest_framework import serializers

from clinic.serializers.text import clean_text


class ReimbursementSerializer(serializers.Serializer):
    date = serializers.DateField()
    employeeId = serializers.CharField(max_length=50)
    fullNameEmployee = serializers.CharField(max_length=150)
    fullNameDependent = serializers.CharField(required=False, allow_blank=True, max_length=150)
    workLocation = serializers.ChoiceField(choices=['Office', 'WFH'])
    receiptDate = serializers.DateField()
    amountRequested = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    email = serializers.EmailField()

    def _required_text(self, v, message):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError(message)
        return v

    def validate_employeeId(self, v):
        return self._required_text(v, 'Employee ID is required')

    def validate_fullNameEmployee(self, v):
        return self._required_text(v, 'Full name of employee is required')

    def validate_fullNameDependent(self, v):
        return clean_text(v)


class ReimbursementStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=['approved', 'rejected', 'pending'])
