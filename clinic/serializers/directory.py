from rest_framework import serializers

from clinic.serializers.text import clean_text


class NamedEntrySerializer(serializers.Serializer):
    """Client or issuer form.  Pass the model so duplicates can be checked."""
    name = serializers.CharField(max_length=100)
    isActive = serializers.BooleanField(required=False)

    def __init__(self, *args, model=None, **kwargs):
        self.model = model
        super().__init__(*args, **kwargs)

    def validate_name(self, v):
        v = clean_text(v)
        label = self.model._meta.verbose_name.title()
        if not v:
            raise serializers.ValidationError(f'{label} name is required')
        qs = self.model.objects.filter(name__iexact=v)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError(f'{label} already exists')
        return v

    def to_model_data(self) -> dict:
        mapping = {'isActive': 'is_active'}
        return {mapping.get(k, k): v for k, v in self.validated_data.items()}
