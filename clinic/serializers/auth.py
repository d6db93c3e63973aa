from rest_framework import serializers

from clinic.models import User

USERNAME_PATTERN = r'^[a-zA-Z0-9_]+$'


class RegisterSerializer(serializers.Serializer):
    username = serializers.RegexField(
        USERNAME_PATTERN, min_length=3, max_length=30,
        error_messages={
            'invalid': 'Username can only contain letters, numbers, and underscores',
            'min_length': 'Username must be between 3 and 30 characters',
            'max_length': 'Username must be between 3 and 30 characters',
        },
    )
    email = serializers.EmailField(error_messages={'invalid': 'Please provide a valid email'})
    password = serializers.CharField(min_length=6, write_only=True, trim_whitespace=False,
                                     error_messages={'min_length': 'Password must be at least 6 characters long'})
    firstName = serializers.CharField(max_length=50,
                                      error_messages={'max_length': 'First name cannot exceed 50 characters'})
    lastName = serializers.CharField(max_length=50,
                                     error_messages={'max_length': 'Last name cannot exceed 50 characters'})
    role = serializers.ChoiceField(choices=[c[0] for c in User.ROLE_CHOICES], required=False,
                                   error_messages={'invalid_choice': 'Invalid role'})

    def validate_email(self, v):
        return v.strip().lower()


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField(error_messages={'invalid': 'Please provide a valid email'})
    password = serializers.CharField(trim_whitespace=False)

    def validate_email(self, v):
        return v.strip().lower()

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Password is required')
        return v
