from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User, AuditLog


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['username', 'email', 'nama_teknisi', 'nik', 'role', 'is_active', 'date_joined']
    list_filter = ['role', 'is_active', 'is_staff', 'is_superuser', 'date_joined']
    search_fields = ['username', 'email', 'nama_teknisi', 'nik']
    ordering = ['username']
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Warehouse', {'fields': ('nik', 'nama_teknisi', 'role', 'permissions', 'photo')}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Warehouse', {'fields': ('email', 'nik', 'nama_teknisi', 'role')}),
    )

    def save_model(self, request, obj, form, change):
        # New users and role changes start from the role's default flags
        if not change or 'role' in form.changed_data:
            obj.reset_permissions()
        super().save_model(request, obj, form, change)


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ['user', 'action', 'model_name', 'object_id', 'object_reference', 'ip_address', 'created_at']
    list_filter = ['action', 'model_name', 'created_at']
    search_fields = ['user__username', 'model_name', 'object_id', 'object_name', 'object_reference']
    ordering = ['-created_at']
    readonly_fields = ['user', 'action', 'model_name', 'object_id', 'object_name', 'object_reference', 'changes', 'ip_address', 'created_at']
