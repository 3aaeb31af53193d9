"""
Client and issuer lists offered on the clinic log form.

Both are plain named entries with an active flag.  Inactive entries stay
in the list so older clinic logs keep making sense, but the form only
offers the active ones.
"""
from __future__ import annotations

from clinic.models import Client, Issuer
from clinic.services.repositories import ModelRepository


class NamedEntryRepository(ModelRepository):

    def __init__(self, model, label: str, active_only: bool = False):
        self.model = model
        self.label = label
        self.active_only = active_only

    def queryset(self):
        qs = self.model.objects.all()
        if self.active_only:
            qs = qs.filter(is_active=True)
        return qs

    def active(self) -> 'NamedEntryRepository':
        return NamedEntryRepository(self.model, self.label, active_only=True)

    def to_record(self, obj) -> dict:
        return {
            'id': obj.id,
            'name': obj.name,
            'isActive': obj.is_active,
            'createdAt': obj.created_at,
            'updatedAt': obj.updated_at,
        }


clients = NamedEntryRepository(Client, 'client')
issuers = NamedEntryRepository(Issuer, 'issuer')

REPOSITORIES = {
    'clients': clients,
    'issuers': issuers,
}
