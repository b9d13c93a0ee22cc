from django.contrib.auth.models import AbstractUser
from django.db import models

from .permissions import ROLE_CHOICES, ROLE_VIEWER, default_permissions


def viewer_permissions():
    return default_permissions(ROLE_VIEWER)


class User(AbstractUser):
    """Warehouse user with a role and a per-user permission map"""
    email = models.EmailField(unique=True)
    nik = models.CharField(max_length=50, blank=True)
    nama_teknisi = models.CharField(max_length=150, blank=True, help_text="Display name, used as the technician on daily bons")
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_VIEWER)
    permissions = models.JSONField(default=viewer_permissions, blank=True)
    photo = models.URLField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.nama_teknisi or self.username

    def reset_permissions(self):
        """Replace the permission map with the defaults of the current role"""
        self.permissions = default_permissions(self.role)

    class Meta:
        db_table = 'users'
        ordering = ['nama_teknisi', 'username']


class AuditLog(models.Model):
    """Audit log for stock movements and user-role changes"""
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('stock_adjust', 'Stock Adjustment'),
        ('stock_import', 'Stock Import'),
        ('stock_delete_all', 'Stock Delete All'),
        ('role_change', 'Role Change'),
        ('password_change', 'Password Change'),
    ]

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='audit_logs')
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    model_name = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    object_name = models.CharField(max_length=255, blank=True, null=True, help_text="Human-readable name of the object (e.g., part number, user name)")
    object_reference = models.CharField(max_length=255, blank=True, null=True, help_text="Reference identifier (e.g., no transaksi, no TKL)")
    changes = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='audit_logs_created_5d8e0b_idx'),
            models.Index(fields=['action'], name='audit_logs_action_1f6a2c_idx'),
            models.Index(fields=['model_name'], name='audit_logs_model_n_7c3b4e_idx'),
            models.Index(fields=['object_reference'], name='audit_logs_object__9a2d1f_idx'),
        ]
