"""
Serializers for account endpoints.
"""
from rest_framework import serializers
from .models import User


class LoginSerializer(serializers.Serializer):
    """Body of POST /login (form-encoded, multipart or JSON)."""
    username = serializers.CharField(max_length=150)
    pw = serializers.CharField(trim_whitespace=False)


class RegistrationSerializer(serializers.Serializer):
    """Body of POST /personal."""
    fname = serializers.CharField(source='first_name', max_length=100)
    lname = serializers.CharField(source='last_name', max_length=100)
    username = serializers.CharField(max_length=150)
    pw = serializers.CharField(source='password', trim_whitespace=False, min_length=1)

    def validate_username(self, value):
        if User.objects.filter(username=value).exists():
            raise serializers.ValidationError("Username is already taken")
        return value


class PersonalSerializer(serializers.ModelSerializer):
    """Response shape for GET /personal."""
    fname = serializers.CharField(source='first_name', read_only=True)
    lname = serializers.CharField(source='last_name', read_only=True)

    class Meta:
        model = User
        fields = ['fname', 'lname', 'username', 'user_permissions']
        read_only_fields = ['username', 'user_permissions']
