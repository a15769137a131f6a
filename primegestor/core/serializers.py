from rest_framework import serializers
from .models import User, ActivityLog

MIN_PASSWORD_LENGTH = 6


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'full_name', 'email', 'role', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate_email(self, value):
        duplicates = User.objects.filter(email__iexact=value)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError('E-mail já existe')
        return value

    def update(self, instance, validated_data):
        # username mirrors the e-mail and is unique
        if 'email' in validated_data:
            instance.username = validated_data['email']
        return super().update(instance, validated_data)


class UserCreateSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=MIN_PASSWORD_LENGTH)

    class Meta:
        model = User
        fields = ['id', 'full_name', 'email', 'password', 'role']

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError('E-mail já existe')
        return value

    def create(self, validated_data):
        password = validated_data.pop('password')
        # Ensure user is active by default
        user = User(**validated_data, username=validated_data['email'], is_active=True)
        user.set_password(password)
        user.save()
        return user


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True, min_length=MIN_PASSWORD_LENGTH)


class AdminResetPasswordSerializer(serializers.Serializer):
    user_id = serializers.PrimaryKeyRelatedField(queryset=User.objects.all(), source='user')
    new_password = serializers.CharField(write_only=True, min_length=MIN_PASSWORD_LENGTH)


class ForgotPasswordSerializer(serializers.Serializer):
    email = serializers.EmailField()


class TokenResetPasswordSerializer(serializers.Serializer):
    token = serializers.CharField()
    new_password = serializers.CharField(write_only=True, min_length=MIN_PASSWORD_LENGTH)


class SupportRequestSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    email = serializers.EmailField()
    subject = serializers.CharField(max_length=255)
    message = serializers.CharField()


class ActivityLogUserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'full_name', 'email']


class ActivityLogSerializer(serializers.ModelSerializer):
    user = ActivityLogUserSerializer(read_only=True)

    class Meta:
        model = ActivityLog
        fields = ['id', 'user', 'action', 'entity_type', 'entity_id', 'entity_name',
                  'details', 'ip_address', 'created_at']
