from rest_framework import serializers


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField(required=False, allow_blank=True)
    username = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField()

    def validate(self, attrs):
        account = (attrs.get('email') or attrs.get('username') or '').strip()
        if not account:
            raise serializers.ValidationError({'email': 'Email is required'})
        attrs['account'] = account
        return attrs

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password is required')
        return v


def user_payload(user) -> dict:
    return {
        'id': user.id,
        'username': user.username,
        'email': user.email,
        'name': user.display_name,
        'role': user.role,
        'nurseId': user.nurse_id,
        'department': user.department,
    }
