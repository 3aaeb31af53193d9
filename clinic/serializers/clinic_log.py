import re

from django.utils import timezone
from rest_framework import serializers

from clinic.serializers.text import clean_text

PERSON_NAME_RE = re.compile(r"^[a-zA-Z\s'-]+$")
EMPLOYEE_NUMBER_RE = re.compile(r'^[A-Z0-9-]+$')


class LineItemSerializer(serializers.Serializer):
    """A medicine or supply issued during the visit.

    ``itemId`` links the line to an inventory item whose stock is
    deducted; without it the item is looked up by name.
    """
    itemId = serializers.IntegerField(required=False, allow_null=True)
    name = serializers.CharField(max_length=150)
    customName = serializers.CharField(required=False, allow_blank=True, max_length=150)
    quantity = serializers.IntegerField(min_value=1, max_value=10000)

    def validate_name(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Name is required')
        return v

    def validate_customName(self, v):
        return clean_text(v)


class ClinicLogSerializer(serializers.Serializer):
    date = serializers.DateField()
    lastName = serializers.CharField(max_length=50)
    firstName = serializers.CharField(max_length=50)
    sex = serializers.ChoiceField(choices=['Male', 'Female'])
    employeeNumber = serializers.CharField(max_length=20)
    client = serializers.CharField(max_length=100)
    chiefComplaint = serializers.CharField(max_length=200)
    medicines = LineItemSerializer(many=True, required=False)
    supplies = LineItemSerializer(many=True, required=False)
    issuedBy = serializers.CharField(max_length=100)
    status = serializers.ChoiceField(choices=['active', 'archived'], required=False)

    def validate_date(self, v):
        if v > timezone.localdate():
            raise serializers.ValidationError('Date cannot be in the future')
        return v

    def _person_name(self, v, label):
        v = clean_text(v)
        if len(v) < 2:
            raise serializers.ValidationError(f'{label} must be at least 2 characters')
        if not PERSON_NAME_RE.match(v):
            raise serializers.ValidationError(
                f'{label} can only contain letters, spaces, apostrophes, and hyphens'
            )
        return v

    def validate_lastName(self, v):
        return self._person_name(v, 'Last name')

    def validate_firstName(self, v):
        return self._person_name(v, 'First name')

    def validate_employeeNumber(self, v):
        v = (v or '').strip()
        if len(v) < 3:
            raise serializers.ValidationError('Employee number must be at least 3 characters')
        if not EMPLOYEE_NUMBER_RE.match(v):
            raise serializers.ValidationError(
                'Employee number can only contain uppercase letters, numbers, and hyphens'
            )
        return v

    def validate_client(self, v):
        v = clean_text(v)
        if len(v) < 2:
            raise serializers.ValidationError('Client must be at least 2 characters')
        return v

    def validate_chiefComplaint(self, v):
        v = clean_text(v)
        if len(v) < 3:
            raise serializers.ValidationError('Chief complaint must be at least 3 characters')
        return v

    def validate_issuedBy(self, v):
        v = clean_text(v)
        if len(v) < 2:
            raise serializers.ValidationError('Issued by must be at least 2 characters')
        return v

    def validate(self, attrs):
        if not attrs.get('medicines') and not attrs.get('supplies'):
            raise serializers.ValidationError({'medicines': 'At least one medicine or supply must be added'})
        return attrs
