from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User, BusinessSettings, PublicPage


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'role',
            'created_at',
            'last_login',
        ]
        read_only_fields = ['id', 'email', 'role', 'created_at', 'last_login']


class UserRegistrationSerializer(serializers.ModelSerializer):
    """Serializer for user registration."""

    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )
    business_name = serializers.CharField(max_length=200, required=False, allow_blank=True)

    class Meta:
        model = User
        fields = ['email', 'password', 'password_confirm', 'display_name', 'business_name']

    def validate(self, attrs):
        """Validate password confirmation."""
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match'
            })
        return attrs


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class BusinessSettingsSerializer(serializers.ModelSerializer):
    """Business profile, currency and booking defaults."""

    tax_rate = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=0,
        max_value=100,
        required=False,
        allow_null=True,
    )
    default_rental_days = serializers.IntegerField(min_value=1, required=False)
    low_stock_threshold = serializers.IntegerField(min_value=0, required=False)

    class Meta:
        model = BusinessSettings
        fields = [
            'business_name',
            'business_email',
            'business_phone',
            'business_address',
            'currency',
            'currency_symbol',
            'tax_rate',
            'low_stock_threshold',
            'default_rental_days',
            'date_format',
            'timezone',
            'updated_at',
        ]
        read_only_fields = ['updated_at']

    def validate_currency(self, value):
        if len(value) != 3 or not value.isalpha():
            raise serializers.ValidationError('Use a three-letter currency code.')
        return value.upper()


class PublicPageSerializer(serializers.ModelSerializer):
    """The user's public availability page."""

    class Meta:
        model = PublicPage
        fields = ['id', 'slug', 'title', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']
        extra_kwargs = {
            # Uniqueness is checked by the service so a user can re-save their own slug
            'slug': {'validators': []},
        }

    def validate_slug(self, value):
        value = value.strip().lower()
        for validator in PublicPage._meta.get_field('slug').validators:
            validator(value)
        return value
