from rest_framework import serializers
from rest_framework.validators import UniqueValidator
from django.contrib.auth.password_validation import validate_password
from django.core import exceptions as django_exc

from .models import CustomUser


class RegistrationSerializer(serializers.ModelSerializer):
    """Registration payload -> creates a regular (non-admin) user."""
    email = serializers.EmailField(
        validators=[UniqueValidator(CustomUser.objects.all(), message="User with this email already exists.", lookup="iexact")],
    )
    password = serializers.CharField(write_only=True, required=True, style={'input_type': 'password'})
    firstName = serializers.CharField(source='first_name', required=False, allow_blank=True, max_length=50)
    lastName = serializers.CharField(source='last_name', required=False, allow_blank=True, max_length=50)
    phoneNumber = serializers.CharField(source='phone_number', required=False, allow_blank=True, max_length=30)

    class Meta:
        model = CustomUser
        fields = ('email', 'password', 'firstName', 'lastName', 'phoneNumber')

    def validate_password(self, value):
        """Run Django's password validators (AUTH_PASSWORD_VALIDATORS)."""
        try:
            validate_password(value)
        except django_exc.ValidationError as e:
            raise serializers.ValidationError(list(e.messages))
        return value

    def create(self, validated_data):
        return CustomUser.objects.create_user(
            email=validated_data['email'],
            password=validated_data['password'],
            first_name=validated_data.get('first_name', ''),
            last_name=validated_data.get('last_name', ''),
            phone_number=validated_data.get('phone_number', ''),
        )


class CustomUserSerializer(serializers.ModelSerializer):
    """Public projection of the current user; role flags are read-only."""
    firstName = serializers.CharField(source='first_name', required=False, allow_blank=True, max_length=50)
    lastName = serializers.CharField(source='last_name', required=False, allow_blank=True, max_length=50)
    phoneNumber = serializers.CharField(source='phone_number', required=False, allow_blank=True, max_length=30)
    isAdmin = serializers.BooleanField(source='is_admin', read_only=True)

    class Meta:
        model = CustomUser
        fields = ('id', 'email', 'firstName', 'lastName', 'phoneNumber', 'isAdmin')
        read_only_fields = ('id', 'email', 'isAdmin')


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField(required=True)
    password = serializers.CharField(required=True, write_only=True, style={'input_type': 'password'})
