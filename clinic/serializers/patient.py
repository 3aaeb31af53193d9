import re

from django.utils import timezone
from rest_framework import serializers

from clinic.models import Patient
from clinic.serializers.text import clean_text

PERSON_NAME_RE = re.compile(r"^[a-zA-Z\s'-]+$")


class PatientSerializer(serializers.Serializer):
    employeeId = serializers.CharField(required=False, allow_blank=True, max_length=20)
    firstName = serializers.CharField(max_length=50)
    lastName = serializers.CharField(max_length=50)
    email = serializers.EmailField()
    birthday = serializers.DateField(required=False, allow_null=True)
    gender = serializers.ChoiceField(choices=['Male', 'Female'], required=False, allow_blank=True)
    company = serializers.CharField(required=False, allow_blank=True, max_length=100)
    medicalHistory = serializers.CharField(required=False, allow_blank=True, max_length=2000)

    def _person_name(self, v, label):
        v = clean_text(v)
        if len(v) < 2:
            raise serializers.ValidationError(f'{label} must be at least 2 characters')
        if not PERSON_NAME_RE.match(v):
            raise serializers.ValidationError(
                f'{label} can only contain letters, spaces, apostrophes, and hyphens'
            )
        return v

    def validate_firstName(self, v):
        return self._person_name(v, 'First name')

    def validate_lastName(self, v):
        return self._person_name(v, 'Last name')

    def validate_employeeId(self, v):
        return (v or '').strip().upper()

    def validate_email(self, v):
        v = v.strip().lower()
        qs = Patient.objects.filter(email__iexact=v)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError('A patient with this email already exists')
        return v

    def validate_birthday(self, v):
        if v is not None and v > timezone.localdate():
            raise serializers.ValidationError('Birthday cannot be in the future')
        return v

    def validate_company(self, v):
        return clean_text(v)

    def validate_medicalHistory(self, v):
        return clean_text(v)
