from rest_framework import serializers

from clinic.models import User
from clinic.serializers.auth import USERNAME_PATTERN


class UserListQuerySerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=[c[0] for c in User.ROLE_CHOICES], required=False)
    search = serializers.CharField(max_length=64, required=False, allow_blank=True)


class UserUpdateSerializer(serializers.Serializer):
    """Profile fields an account may change; ``password`` is never accepted here."""
    username = serializers.RegexField(USERNAME_PATTERN, min_length=3, max_length=30, required=False)
    email = serializers.EmailField(required=False)
    firstName = serializers.CharField(max_length=50, required=False)
    lastName = serializers.CharField(max_length=50, required=False)
    role = serializers.ChoiceField(choices=[c[0] for c in User.ROLE_CHOICES], required=False)

    def validate_email(self, v):
        return v.strip().lower()
