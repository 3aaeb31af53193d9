from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.serializers.settings import UserSettingsSerializer
from clinic.services import tables
from clinic.services.user_settings import reset_settings, settings_for, to_record, update_settings
from clinic.services.users import internal_users


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def internal_user_list(request):
    """Staff directory used to pick nurses and approvers."""
    return tables.table_response(request, tables.INTERNAL_USERS, internal_users.get_all())


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def user_settings(request):
    if request.method == 'POST':
        s = UserSettingsSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        return Response({'ok': True, 'data': update_settings(request.user, s.validated_data)})
    return Response({'ok': True, 'data': to_record(settings_for(request.user))})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def user_settings_reset(request):
    return Response({'ok': True, 'data': reset_settings(request.user)})
