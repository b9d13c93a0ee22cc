from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password

from .models import User, AuditLog
from .permissions import ROLE_CHOICES, ROLE_VIEWER, default_permissions, normalize_permissions, navigation_for


def username_from_email(email):
    """Derive a free username from the local part of an e-mail address"""
    base = email.split('@')[0][:140] or 'user'
    username = base
    suffix = 1
    while User.objects.filter(username=username).exists():
        suffix += 1
        username = f"{base}{suffix}"
    return username


class UserSerializer(serializers.ModelSerializer):
    users = serializers.CharField(source='username', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'users', 'username', 'nik', 'nama_teknisi', 'email', 'role', 'permissions', 'photo',
                  'is_active', 'created_at', 'updated_at']
        read_only_fields = ['username', 'permissions', 'role', 'created_at', 'updated_at']


class CurrentUserSerializer(UserSerializer):
    """The logged-in user plus the menu entries the UI may render"""
    navigation = serializers.SerializerMethodField()
    is_admin = serializers.SerializerMethodField()

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ['navigation', 'is_admin']

    def get_navigation(self, obj):
        return navigation_for(obj)

    def get_is_admin(self, obj):
        return obj.is_superuser or obj.role == 'Admin'


class PermissionsField(serializers.JSONField):
    def to_internal_value(self, data):
        data = super().to_internal_value(data)
        try:
            return normalize_permissions(data)
        except ValueError as e:
            raise serializers.ValidationError(str(e))


class UserCreateSerializer(serializers.ModelSerializer):
    """User-role management: an admin adds a new user"""
    password = serializers.CharField(write_only=True, min_length=6)
    role = serializers.ChoiceField(choices=ROLE_CHOICES)

    class Meta:
        model = User
        fields = ['nama_teknisi', 'nik', 'email', 'password', 'role']
        extra_kwargs = {
            'nama_teknisi': {'required': True, 'allow_blank': False},
            'nik': {'required': True, 'allow_blank': False},
        }

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("This email is already registered.")
        return value

    def create(self, validated_data):
        password = validated_data.pop('password')
        user = User(
            username=username_from_email(validated_data['email']),
            permissions=default_permissions(validated_data['role']),
            **validated_data,
        )
        user.set_password(password)
        user.save()
        return user


class RegisterSerializer(serializers.ModelSerializer):
    """Self-registration; new accounts start as Viewer"""
    full_name = serializers.CharField(source='nama_teknisi')
    password = serializers.CharField(write_only=True, validators=[validate_password])
    password_confirm = serializers.CharField(write_only=True)

    class Meta:
        model = User
        fields = ['username', 'nik', 'full_name', 'email', 'password', 'password_confirm']
        extra_kwargs = {'nik': {'required': True, 'allow_blank': False}}

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("This email is already registered.")
        return value

    def validate(self, attrs):
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({"password": "Passwords don't match"})
        return attrs

    def create(self, validated_data):
        validated_data.pop('password_confirm')
        password = validated_data.pop('password')
        user = User(
            role=ROLE_VIEWER,
            permissions=default_permissions(ROLE_VIEWER),
            is_active=True,
            **validated_data,
        )
        user.set_password(password)
        user.save()
        return user


class UserRoleSerializer(serializers.ModelSerializer):
    """
    Role and permission update.

    Changing the role without sending ``permissions`` resets the map to the
    new role's defaults; sending ``permissions`` stores them as given.
    """
    role = serializers.ChoiceField(choices=ROLE_CHOICES, required=False)
    permissions = PermissionsField(required=False)

    class Meta:
        model = User
        fields = ['role', 'permissions', 'nama_teknisi', 'nik', 'is_active']

    def update(self, instance, validated_data):
        permissions = validated_data.pop('permissions', None)
        new_role = validated_data.get('role', instance.role)
        role_changed = new_role != instance.role
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if permissions is not None:
            instance.permissions = permissions
        elif role_changed:
            instance.reset_permissions()
        instance.save()
        return instance


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True, min_length=6)
    confirm_password = serializers.CharField(write_only=True)

    def validate_current_password(self, value):
        user = self.context['request'].user
        if not user.check_password(value):
            raise serializers.ValidationError("Current password is incorrect.")
        return value

    def validate(self, attrs):
        if attrs['new_password'] != attrs['confirm_password']:
            raise serializers.ValidationError({"confirm_password": "Password confirmation does not match."})
        return attrs

    def save(self, **kwargs):
        user = self.context['request'].user
        user.set_password(self.validated_data['new_password'])
        user.save(update_fields=['password', 'updated_at'])
        return user


class ProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['photo']


class AuditLogSerializer(serializers.ModelSerializer):
    user = UserSerializer(read_only=True)

    class Meta:
        model = AuditLog
        fields = ['id', 'user', 'action', 'model_name', 'object_id', 'object_name',
                  'object_reference', 'changes', 'ip_address', 'created_at']
