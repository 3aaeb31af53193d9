"""
Inventory services: medicines, supplies, their categories and suppliers,
and the stock movements recorded against them.

Every change of an item's stock goes through :func:`move_stock`, which
locks the item row, refuses to go below zero and writes an
:class:`~clinic.models.InventoryTransaction` with the before/after levels.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction
from django.db.models import F

from clinic.exceptions import InsufficientStock, InUse
from clinic.models import Category, InventoryItem, InventoryTransaction, Supplier
from clinic.services.audit import record_activity
from clinic.services.repositories import ModelRepository

logger = logging.getLogger(__name__)

INITIAL_STOCK_REASON = 'Initial stock entry'
MANUAL_UPDATE_REASON = 'Stock updated from item form'


def _user_name(user) -> str:
    return user.display_name if user is not None and getattr(user, 'pk', None) else 'System'


def move_stock(item: InventoryItem, quantity: int, *, type: str, reason: str, user=None) -> InventoryTransaction:
    """Add ``quantity`` (negative to remove) to ``item.stock`` and log it."""
    with transaction.atomic():
        locked = InventoryItem.objects.select_for_update().get(pk=item.pk)
        previous = locked.stock
        new = previous + quantity
        if new < 0:
            raise InsufficientStock(locked.name, previous, -quantity)
        locked.stock = new
        locked.save(update_fields=['stock', 'updated_at'])
        item.stock = new
        txn = InventoryTransaction.objects.create(
            type=type,
            item=locked,
            item_type=locked.item_type,
            item_name=locked.name,
            quantity=quantity,
            previous_stock=previous,
            new_stock=new,
            reason=reason,
            user=user if getattr(user, 'pk', None) else None,
            user_name=_user_name(user),
        )
    logger.info('stock %s %s: %d -> %d (%s)', type, locked.name, previous, new, reason)
    return txn


def adjust_stock(item: InventoryItem, quantity: int, reason: str, user, type: Optional[str] = None) -> InventoryTransaction:
    """Manual adjustment from the inventory screen."""
    if type is None:
        type = InventoryTransaction.TYPE_STOCK_IN if quantity > 0 else InventoryTransaction.TYPE_STOCK_OUT
    txn = move_stock(item, quantity, type=type, reason=reason, user=user)
    record_activity(
        user=user, type='inventory',
        title=f'Stock adjusted: {item.name}',
        description=f'{quantity:+d} ({reason})',
        metadata={'itemId': item.pk, 'itemType': item.item_type, 'transactionId': txn.pk},
    )
    return txn


# ---------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------
class InventoryRepository(ModelRepository):
    model = InventoryItem

    def __init__(self, item_type: str):
        self.item_type = item_type
        self.label = item_type

    def queryset(self):
        return InventoryItem.objects.filter(item_type=self.item_type).select_related('category', 'supplier')

    def to_record(self, obj: InventoryItem) -> dict:
        return {
            'id': obj.id,
            'type': obj.item_type,
            'name': obj.name,
            'description': obj.description,
            'category': obj.category.name if obj.category else None,
            'categoryId': obj.category_id,
            'supplier': obj.supplier.name if obj.supplier else None,
            'supplierId': obj.supplier_id,
            'stock': obj.stock,
            'reorderLevel': obj.reorder_level,
            'price': obj.price,
            'unit': obj.unit,
            'stockStatus': obj.stock_status,
            'createdAt': obj.created_at,
            'updatedAt': obj.updated_at,
        }

    def create(self, data: dict, user):
        stock = data.pop('stock', 0) or 0
        item = InventoryItem.objects.create(item_type=self.item_type, stock=0, **data)
        if stock > 0:
            move_stock(item, stock, type=InventoryTransaction.TYPE_STOCK_IN, reason=INITIAL_STOCK_REASON, user=user)
        record_activity(
            user=user, type='inventory',
            title=f'{item.get_item_type_display()} added: {item.name}',
            description=f'Initial stock {stock}',
            metadata={'itemId': item.pk, 'itemType': item.item_type},
        )
        return item

    def update(self, obj: InventoryItem, data: dict, user):
        # stock is owned by move_stock; a plain save would write back a stale level
        stock = data.pop('stock', None)
        for k, v in data.items():
            setattr(obj, k, v)
        obj.save(update_fields=[*data.keys(), 'updated_at'])
        if stock is not None:
            current = InventoryItem.objects.select_for_update().values_list('stock', flat=True).get(pk=obj.pk)
            if stock != current:
                move_stock(obj, stock - current, type=InventoryTransaction.TYPE_ADJUSTMENT,
                           reason=MANUAL_UPDATE_REASON, user=user)
        return obj

    def destroy(self, obj: InventoryItem, user) -> None:
        name = obj.name
        obj.delete()
        record_activity(
            user=user, type='inventory',
            title=f'{self.item_type.title()} deleted: {name}',
            metadata={'itemType': self.item_type},
        )


medicines = InventoryRepository(InventoryItem.TYPE_MEDICINE)
supplies = InventoryRepository(InventoryItem.TYPE_SUPPLY)

REPOSITORIES = {
    'medicines': medicines,
    'supplies': supplies,
}


class TransactionRepository(ModelRepository):
    model = InventoryTransaction
    label = 'transaction'

    def queryset(self):
        return InventoryTransaction.objects.all()

    def to_record(self, obj: InventoryTransaction) -> dict:
        return {
            'id': obj.id,
            'type': obj.type,
            'itemId': obj.item_id,
            'itemType': obj.item_type,
            'itemName': obj.item_name,
            'quantity': obj.quantity,
            'previousStock': obj.previous_stock,
            'newStock': obj.new_stock,
            'reason': obj.reason,
            'userName': obj.user_name,
            'createdAt': obj.created_at,
        }


transactions = TransactionRepository()


class CategoryRepository(ModelRepository):
    model = Category
    label = 'category'

    def __init__(self, item_type: Optional[str] = None):
        self.item_type = item_type

    def queryset(self):
        qs = Category.objects.all()
        if self.item_type:
            qs = qs.filter(item_type=self.item_type)
        return qs

    def to_record(self, obj: Category) -> dict:
        return {'id': obj.id, 'type': obj.item_type, 'name': obj.name}

    def destroy(self, obj: Category, user) -> None:
        in_use = obj.items.count()
        if in_use:
            raise InUse(f'Category "{obj.name}" is used by {in_use} item(s).')
        obj.delete()


class SupplierRepository(ModelRepository):
    model = Supplier
    label = 'supplier'

    def to_record(self, obj: Supplier) -> dict:
        return {'id': obj.id, 'name': obj.name}


categories = CategoryRepository()
suppliers = SupplierRepository()


def low_stock_count() -> int:
    return InventoryItem.objects.filter(stock__lte=F('reorder_level')).count()
