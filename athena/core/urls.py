from django.urls import path
from .views import (
    CustomTokenObtainPairView, CustomTokenRefreshView, register, user_me, change_password,
    user_list_create, user_detail, technician_list,
    audit_log_list, audit_log_detail,
)

urlpatterns = [
    # Auth endpoints
    path('auth/register/', register, name='register'),
    path('auth/login/', CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', user_me, name='user-me'),
    path('auth/change-password/', change_password, name='change-password'),

    # User-role endpoints
    path('users/', user_list_create, name='user-list-create'),
    path('users/technicians/', technician_list, name='technician-list'),
    path('users/<int:pk>/', user_detail, name='user-detail'),

    # AuditLog endpoints
    path('audit-logs/', audit_log_list, name='audit-log-list'),
    path('audit-logs/<int:pk>/', audit_log_detail, name='audit-log-detail'),
]
