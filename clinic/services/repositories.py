"""
Record repositories over the Django ORM.

Every resource exposed as a table is read and written through a small
repository object with a uniform interface::

    get_all() -> list[dict]
    get(id) -> dict | None
    save(data, user) -> dict        # create without 'id', update with it
    delete(id, user) -> None

Records are plain dicts keyed the way the front end names its fields, so
the same record feeds the JSON response, the table engine and the CSV
export.  Subclasses provide the queryset, the model -> record conversion
and the create/update/delete side effects (stock movements, activity
entries).
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from django.db import transaction
from rest_framework.exceptions import NotFound

logger = logging.getLogger(__name__)


class ModelRepository:
    model: Any = None
    label = 'record'

    def queryset(self):
        return self.model.objects.all()

    def to_record(self, obj) -> dict:  # pragma: no cover - abstract
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_all(self) -> list[dict]:
        return [self.to_record(obj) for obj in self.queryset()]

    def get_object(self, id) -> Any:
        obj = self.queryset().filter(pk=id).first()
        if obj is None:
            raise NotFound(f'{self.label} not found')
        return obj

    def get(self, id) -> Optional[dict]:
        obj = self.queryset().filter(pk=id).first()
        return self.to_record(obj) if obj is not None else None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def save(self, data: dict, user) -> dict:
        data = dict(data)
        pk = data.pop('id', None)
        with transaction.atomic():
            if pk is None:
                obj = self.create(data, user)
                logger.info('created %s %s', self.label, obj.pk)
            else:
                obj = self.update(self.get_object(pk), data, user)
                logger.info('updated %s %s', self.label, obj.pk)
        return self.to_record(self.get_object(obj.pk))

    def delete(self, id, user) -> None:
        with transaction.atomic():
            obj = self.get_object(id)
            self.destroy(obj, user)
        logger.info('deleted %s %s', self.label, id)

    def create(self, data: dict, user):
        return self.model.objects.create(**data)

    def update(self, obj, data: dict, user):
        for k, v in data.items():
            setattr(obj, k, v)
        obj.save()
        return obj

    def destroy(self, obj, user) -> None:
        obj.delete()
