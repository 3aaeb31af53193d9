from clinic.models import User
from clinic.services.repositories import ModelRepository


class InternalUserRepository(ModelRepository):
    """Read-only staff directory."""
    model = User
    label = 'user'

    def queryset(self):
        return User.objects.filter(is_active=True).exclude(role='').order_by('last_name', 'first_name', 'username')

    def to_record(self, obj: User) -> dict:
        return {
            'id': obj.id,
            'name': obj.display_name,
            'email': obj.email,
            'role': obj.role,
            'nurseId': obj.nurse_id or None,
            'department': obj.department or None,
        }


internal_users = InternalUserRepository()
