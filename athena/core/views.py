import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken, TokenError
from rest_framework_simplejwt.settings import api_settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ObjectDoesNotExist
from django.shortcuts import get_object_or_404

from .models import AuditLog
from .permissions import FeaturePermission, ROLE_ADMIN, ROLE_TEKNISI, has_permission, is_admin
from .serializers import (
    UserSerializer, CurrentUserSerializer, UserCreateSerializer, RegisterSerializer,
    UserRoleSerializer, ChangePasswordSerializer, ProfileSerializer, AuditLogSerializer
)
from .utils import create_audit_log, paginate

logger = logging.getLogger(__name__)

User = get_user_model()


def _restricted_role_change(request, target=None):
    """Reason a non-admin may not make this role change, or None when allowed"""
    if is_admin(request.user):
        return None
    if request.data.get('role') == ROLE_ADMIN:
        return 'Only an Admin can grant the Admin role.'
    if target is None:
        return None
    if target.role == ROLE_ADMIN:
        return 'Only an Admin can change an Admin account.'
    if target.pk == request.user.pk and ('role' in request.data or 'permissions' in request.data):
        return 'You cannot change your own role or permissions.'
    return None


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        # Accounts sign in with their e-mail address as well as their username
        login = attrs.get(self.username_field) or ''
        if '@' in login:
            match = User.objects.filter(email__iexact=login).first()
            if match:
                attrs[self.username_field] = match.get_username()
        data = super().validate(attrs)
        if not self.user.is_active:
            raise AuthenticationFailed('User account is disabled.')
        data['user'] = CurrentUserSerializer(self.user).data
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['role'] = user.role
        token['nama_teknisi'] = user.nama_teknisi
        return token


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """Token refresh that reports deleted users as an invalid token"""
    def validate(self, attrs):
        try:
            refresh = self.token_class(attrs['refresh'])
        except TokenError:
            raise InvalidToken('Token is invalid or expired.')
        user_id = refresh.payload.get(api_settings.USER_ID_CLAIM)
        if not User.objects.filter(**{api_settings.USER_ID_FIELD: user_id, 'is_active': True}).exists():
            raise InvalidToken('Token is invalid. User no longer exists.')
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except (ObjectDoesNotExist, AuthenticationFailed):
            raise InvalidToken('Token is invalid. User no longer exists.')


class CustomTokenRefreshView(TokenRefreshView):
    serializer_class = CustomTokenRefreshSerializer


@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Self-registration endpoint"""
    serializer = RegisterSerializer(data=request.data)
    if serializer.is_valid():
        user = serializer.save()
        token = CustomTokenObtainPairSerializer.get_token(user)
        logger.info(f"New account registered: {user.username}")
        return Response({
            'user': CurrentUserSerializer(user).data,
            'access': str(token.access_token),
            'refresh': str(token),
        }, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Current user with permissions and navigation; PATCH updates the profile photo"""
    if request.method == 'PATCH':
        serializer = ProfileSerializer(request.user, data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer.save()
    return Response(CurrentUserSerializer(request.user).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def change_password(request):
    """Change the current user's password after re-checking the old one"""
    serializer = ChangePasswordSerializer(data=request.data, context={'request': request})
    if serializer.is_valid():
        user = serializer.save()
        create_audit_log(
            request=request,
            action='password_change',
            model_name='User',
            object_id=user.id,
            object_name=str(user),
        )
        return Response({'detail': 'Password changed.'})
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# User-role management
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, FeaturePermission('userrole')])
def user_list_create(request):
    """List all users or add a new user"""
    if request.method == 'GET':
        users = User.objects.all()
        role = request.query_params.get('role')
        if role:
            users = users.filter(role=role)
        serializer = UserSerializer(users, many=True)
        return Response(serializer.data)
    else:
        reason = _restricted_role_change(request)
        if reason:
            return Response({'detail': reason}, status=status.HTTP_403_FORBIDDEN)
        serializer = UserCreateSerializer(data=request.data)
        if serializer.is_valid():
            user = serializer.save()
            create_audit_log(
                request=request,
                action='create',
                model_name='User',
                object_id=user.id,
                object_name=str(user),
                changes={'email': user.email, 'role': user.role},
            )
            return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, FeaturePermission('userrole')])
def user_detail(request, pk):
    """Retrieve, update the role/permissions of, or delete a user"""
    user = get_object_or_404(User, pk=pk)

    if request.method == 'GET':
        serializer = UserSerializer(user)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        reason = _restricted_role_change(request, user)
        if reason:
            return Response({'detail': reason}, status=status.HTTP_403_FORBIDDEN)
        previous_role = user.role
        serializer = UserRoleSerializer(user, data=request.data, partial=True)
        if serializer.is_valid():
            user = serializer.save()
            create_audit_log(
                request=request,
                action='role_change',
                model_name='User',
                object_id=user.id,
                object_name=str(user),
                changes={
                    'previous_role': previous_role,
                    'role': user.role,
                    'permissions': user.permissions,
                },
            )
            return Response(UserSerializer(user).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if user.pk == request.user.pk:
            return Response({'error': 'You cannot delete your own account.'}, status=status.HTTP_400_BAD_REQUEST)
        create_audit_log(
            request=request,
            action='delete',
            model_name='User',
            object_id=user.id,
            object_name=str(user),
            changes={'email': user.email, 'role': user.role},
        )
        user.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def technician_list(request):
    """Technicians available for daily bon selection"""
    if not (has_permission(request.user, 'dailybon', 'view') or has_permission(request.user, 'userrole', 'view')):
        return Response({'detail': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    technicians = User.objects.filter(role=ROLE_TEKNISI, is_active=True)
    return Response([
        {'id': t.id, 'nama_teknisi': t.nama_teknisi, 'nik': t.nik}
        for t in technicians
    ])


# AuditLog views (read-only)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_list(request):
    """List audit logs with filtering"""
    queryset = AuditLog.objects.select_related('user').all()

    if not (request.user.is_staff or is_admin(request.user)):
        queryset = queryset.filter(user=request.user)

    action_filter = request.query_params.get('action', None)
    if action_filter:
        queryset = queryset.filter(action=action_filter)

    model_filter = request.query_params.get('model', None)
    if model_filter:
        queryset = queryset.filter(model_name=model_filter)

    date_from = request.query_params.get('date_from', None)
    date_to = request.query_params.get('date_to', None)
    if date_from:
        queryset = queryset.filter(created_at__date__gte=date_from)
    if date_to:
        queryset = queryset.filter(created_at__date__lte=date_to)

    return Response(paginate(request, queryset.order_by('-created_at'), AuditLogSerializer))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_detail(request, pk):
    """Retrieve an audit log"""
    audit_log = get_object_or_404(AuditLog, pk=pk)

    if not (request.user.is_staff or is_admin(request.user)) and audit_log.user != request.user:
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)

    serializer = AuditLogSerializer(audit_log)
    return Response(serializer.data)
