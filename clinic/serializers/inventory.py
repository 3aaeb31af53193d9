from rest_framework import serializers

from clinic.models import Category, InventoryItem, InventoryTransaction, Supplier
from clinic.serializers.text import clean_text


class InventoryItemSerializer(serializers.Serializer):
    """Medicine/supply form.  ``category`` and ``supplier`` are given by name."""
    name = serializers.CharField(max_length=150)
    description = serializers.CharField(required=False, allow_blank=True, max_length=1000)
    category = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=100)
    supplier = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=150)
    stock = serializers.IntegerField(required=False, min_value=0)
    reorderLevel = serializers.IntegerField(required=False, min_value=0)
    price = serializers.DecimalField(required=False, allow_null=True, max_digits=10, decimal_places=2, min_value=0)
    unit = serializers.CharField(required=False, allow_blank=True, max_length=30)

    def __init__(self, *args, item_type=None, **kwargs):
        self.item_type = item_type
        super().__init__(*args, **kwargs)

    @property
    def category_type(self):
        return {
            InventoryItem.TYPE_MEDICINE: Category.TYPE_MEDICINE,
            InventoryItem.TYPE_SUPPLY: Category.TYPE_SUPPLY,
        }.get(self.item_type)

    def validate_name(self, v):
        v = clean_text(v)
        if len(v) < 2:
            raise serializers.ValidationError('Name must be at least 2 characters')
        return v

    def validate_description(self, v):
        return clean_text(v)

    def validate_unit(self, v):
        return clean_text(v)

    def validate_category(self, v):
        v = clean_text(v)
        if not v:
            return None
        qs = Category.objects.filter(name__iexact=v)
        if self.category_type:
            qs = qs.filter(item_type=self.category_type)
        category = qs.first()
        if category is None:
            raise serializers.ValidationError(f'Unknown category "{v}"')
        return category

    def validate_supplier(self, v):
        v = clean_text(v)
        if not v:
            return None
        supplier = Supplier.objects.filter(name__iexact=v).first()
        if supplier is None:
            raise serializers.ValidationError(f'Unknown supplier "{v}"')
        return supplier

    def validate(self, attrs):
        name = attrs.get('name')
        if name and self.item_type:
            qs = InventoryItem.objects.filter(item_type=self.item_type, name__iexact=name)
            if self.instance is not None:
                qs = qs.exclude(pk=self.instance.pk)
            if qs.exists():
                raise serializers.ValidationError({'name': f'{name} already exists'})
        return attrs

    def to_model_data(self) -> dict:
        """Validated data renamed to model field names."""
        mapping = {'reorderLevel': 'reorder_level'}
        return {mapping.get(k, k): v for k, v in self.validated_data.items()}


class StockAdjustSerializer(serializers.Serializer):
    quantity = serializers.IntegerField()
    reason = serializers.CharField(max_length=255)
    type = serializers.ChoiceField(choices=[c for c, _ in InventoryTransaction.TYPE_CHOICES], required=False)

    def validate_quantity(self, v):
        if v == 0:
            raise serializers.ValidationError('Quantity must not be zero')
        return v

    def validate_reason(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Reason is required')
        return v


class CategorySerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    type = serializers.ChoiceField(choices=[c for c, _ in Category.TYPE_CHOICES])

    def validate_name(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Name is required')
        return v

    def validate(self, attrs):
        qs = Category.objects.filter(item_type=attrs['type'], name__iexact=attrs['name'])
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError({'name': 'Category already exists'})
        return attrs

    def to_model_data(self) -> dict:
        return {'name': self.validated_data['name'], 'item_type': self.validated_data['type']}


class SupplierSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)

    def validate_name(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Name is required')
        qs = Supplier.objects.filter(name__iexact=v)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError('Supplier already exists')
        return v
