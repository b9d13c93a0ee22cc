"""
Test suite for the core module
Tests: role permission matrix, navigation, auth endpoints, user-role management, audit logs
"""
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from athena.core.models import User, AuditLog
from athena.core.permissions import (
    PERMISSION_KEYS, ROLE_ADMIN, ROLE_MANAGER, ROLE_TEKNISI, ROLE_VIEWER,
    default_permissions, normalize_permissions, has_permission, navigation_for,
)
from athena.core.test_utils import TestDataFactory, AuthenticatedAPIClient


class PermissionMatrixTests(TestCase):
    """Default permission maps per role"""

    def test_permission_key_count(self):
        self.assertEqual(len(PERMISSION_KEYS), 29)
        self.assertIn('dashboard_edit', PERMISSION_KEYS)
        self.assertNotIn('dashboard_delete', PERMISSION_KEYS)

    def test_admin_has_everything(self):
        self.assertTrue(all(default_permissions(ROLE_ADMIN).values()))

    def test_manager_defaults(self):
        perms = default_permissions(ROLE_MANAGER)
        self.assertTrue(perms['reportstock_edit'])
        self.assertTrue(perms['dailybon_view'])
        self.assertFalse(perms['dailybon_edit'])
        self.assertFalse(any(v for k, v in perms.items() if k.endswith('_delete')))

    def test_teknisi_defaults(self):
        perms = default_permissions(ROLE_TEKNISI)
        granted = sorted(k for k, v in perms.items() if v)
        self.assertEqual(granted, sorted([
            'dashboard_view', 'reportstock_view', 'dailybon_view', 'dailybon_edit',
            'userrole_view', 'nr_view', 'tsn_view', 'tsp_view', 'sob_view',
        ]))

    def test_viewer_defaults(self):
        perms = default_permissions(ROLE_VIEWER)
        granted = sorted(k for k, v in perms.items() if v)
        self.assertEqual(granted, ['dashboard_view', 'userrole_view'])

    def test_unknown_role(self):
        with self.assertRaises(ValueError):
            default_permissions('Owner')

    def test_default_permissions_returns_copy(self):
        perms = default_permissions(ROLE_VIEWER)
        perms['msk_view'] = True
        self.assertFalse(default_permissions(ROLE_VIEWER)['msk_view'])

    def test_normalize_fills_missing_flags(self):
        perms = normalize_permissions({'msk_view': True})
        self.assertEqual(len(perms), 29)
        self.assertTrue(perms['msk_view'])
        self.assertFalse(perms['msk_edit'])

    def test_normalize_rejects_unknown_and_non_bool(self):
        with self.assertRaises(ValueError):
            normalize_permissions({'warehouse_view': True})
        with self.assertRaises(ValueError):
            normalize_permissions({'msk_view': 'yes'})
        with self.assertRaises(ValueError):
            normalize_permissions(['msk_view'])


class NavigationTests(TestCase):

    def test_teknisi_navigation_order(self):
        user = TestDataFactory.create_user(role=ROLE_TEKNISI)
        labels = [entry['label'] for entry in navigation_for(user)]
        self.assertEqual(labels, ['Dashboard', 'Report Stock', 'Daily Bon', 'SOB', 'NR', 'TSN', 'TSP', 'User Role'])

    def test_viewer_navigation(self):
        user = TestDataFactory.create_user(role=ROLE_VIEWER)
        self.assertEqual([entry['href'] for entry in navigation_for(user)], ['/', '/user-roles'])

    def test_superuser_sees_everything(self):
        user = TestDataFactory.create_user(role=ROLE_VIEWER, is_superuser=True)
        self.assertEqual(len(navigation_for(user)), 10)
        self.assertTrue(has_permission(user, 'msk', 'delete'))

    def test_empty_permissions_hide_everything(self):
        user = TestDataFactory.create_user(role=ROLE_ADMIN, permissions={})
        self.assertEqual(navigation_for(user), [])


class AuthAPITests(TestCase):
    """Register, login, refresh, profile and password endpoints"""

    def setUp(self):
        self.client = APIClient()

    def test_register_creates_viewer(self):
        data = {
            'username': 'andi',
            'nik': '12345',
            'full_name': 'Andi Saputra',
            'email': 'andi@example.com',
            'password': 'secret123',
            'password_confirm': 'secret123',
        }
        response = self.client.post('/api/v1/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('access', response.data)
        user = User.objects.get(username='andi')
        self.assertEqual(user.role, ROLE_VIEWER)
        self.assertEqual(user.nama_teknisi, 'Andi Saputra')
        self.assertEqual(user.permissions, default_permissions(ROLE_VIEWER))

    def test_register_password_mismatch(self):
        data = {
            'username': 'andi', 'nik': '1', 'full_name': 'Andi', 'email': 'andi@example.com',
            'password': 'secret123', 'password_confirm': 'secret124',
        }
        response = self.client.post('/api/v1/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password', response.data)

    def test_login_with_email(self):
        TestDataFactory.create_user(username='sari', email='sari@example.com', password='secret123')
        response = self.client.post('/api/v1/auth/login/', {'username': 'sari@example.com', 'password': 'secret123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['username'], 'sari')

    def test_login_disabled_account(self):
        user = TestDataFactory.create_user(username='off', password='secret123')
        user.is_active = False
        user.save()
        response = self.client.post('/api/v1/auth/login/', {'username': 'off', 'password': 'secret123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh_for_deleted_user(self):
        TestDataFactory.create_user(username='gone', password='secret123')
        login = self.client.post('/api/v1/auth/login/', {'username': 'gone', 'password': 'secret123'}, format='json')
        User.objects.filter(username='gone').delete()
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': login.data['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_includes_navigation(self):
        user = TestDataFactory.create_user(role=ROLE_TEKNISI)
        client = AuthenticatedAPIClient().authenticate_user(user)
        response = client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['role'], ROLE_TEKNISI)
        self.assertEqual(response.data['navigation'][0]['href'], '/')
        self.assertFalse(response.data['is_admin'])

    def test_update_photo(self):
        user = TestDataFactory.create_user()
        client = AuthenticatedAPIClient().authenticate_user(user)
        response = client.patch('/api/v1/auth/me/', {'photo': 'https://cdn.example.com/u/1.png'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertEqual(user.photo, 'https://cdn.example.com/u/1.png')

    def test_change_password(self):
        user = TestDataFactory.create_user(password='oldpass1')
        client = AuthenticatedAPIClient().authenticate_user(user)
        data = {'current_password': 'oldpass1', 'new_password': 'newpass1', 'confirm_password': 'newpass1'}
        response = client.post('/api/v1/auth/change-password/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertTrue(user.check_password('newpass1'))
        self.assertTrue(AuditLog.objects.filter(action='password_change', object_id=str(user.id)).exists())

    def test_change_password_wrong_current(self):
        user = TestDataFactory.create_user(password='oldpass1')
        client = AuthenticatedAPIClient().authenticate_user(user)
        data = {'current_password': 'nope', 'new_password': 'newpass1', 'confirm_password': 'newpass1'}
        response = client.post('/api/v1/auth/change-password/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('current_password', response.data)

    def test_change_password_too_short(self):
        user = TestDataFactory.create_user(password='oldpass1')
        client = AuthenticatedAPIClient().authenticate_user(user)
        data = {'current_password': 'oldpass1', 'new_password': '123', 'confirm_password': '123'}
        response = client.post('/api/v1/auth/change-password/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unauthenticated_me(self):
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class UserRoleAPITests(TestCase):
    """User-role management gated by the userrole flags"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(role=ROLE_ADMIN)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_create_user_derives_username(self):
        data = {'nama_teknisi': 'Budi', 'nik': '777', 'email': 'budi.s@example.com', 'password': 'secret1', 'role': ROLE_TEKNISI}
        response = self.client.post('/api/v1/users/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['users'], 'budi.s')
        user = User.objects.get(email='budi.s@example.com')
        self.assertEqual(user.permissions, default_permissions(ROLE_TEKNISI))

    def test_create_user_dedupes_username(self):
        TestDataFactory.create_user(username='budi', email='budi@other.com')
        data = {'nama_teknisi': 'Budi', 'nik': '777', 'email': 'budi@example.com', 'password': 'secret1', 'role': ROLE_VIEWER}
        response = self.client.post('/api/v1/users/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['username'], 'budi2')

    def test_create_user_duplicate_email(self):
        TestDataFactory.create_user(email='dup@example.com')
        data = {'nama_teknisi': 'Dup', 'nik': '1', 'email': 'dup@example.com', 'password': 'secret1', 'role': ROLE_VIEWER}
        response = self.client.post('/api/v1/users/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data)

    def test_role_change_resets_permissions(self):
        user = TestDataFactory.create_user(role=ROLE_VIEWER)
        response = self.client.patch(f'/api/v1/users/{user.id}/', {'role': ROLE_MANAGER}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertEqual(user.permissions, default_permissions(ROLE_MANAGER))
        self.assertTrue(AuditLog.objects.filter(action='role_change', object_id=str(user.id)).exists())

    def test_explicit_permissions_are_kept(self):
        user = TestDataFactory.create_user(role=ROLE_VIEWER)
        data = {'role': ROLE_TEKNISI, 'permissions': {'dashboard_view': True, 'msk_view': True}}
        response = self.client.patch(f'/api/v1/users/{user.id}/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertEqual(user.role, ROLE_TEKNISI)
        self.assertTrue(user.permissions['msk_view'])
        self.assertFalse(user.permissions['dailybon_view'])

    def test_unknown_permission_flag_rejected(self):
        user = TestDataFactory.create_user()
        response = self.client.patch(f'/api/v1/users/{user.id}/', {'permissions': {'root': True}}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cannot_delete_self(self):
        response = self.client.delete(f'/api/v1/users/{self.admin.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(User.objects.filter(pk=self.admin.pk).exists())

    def test_delete_user(self):
        user = TestDataFactory.create_user()
        response = self.client.delete(f'/api/v1/users/{user.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(User.objects.filter(pk=user.pk).exists())

    def test_viewer_can_list_but_not_edit(self):
        viewer = TestDataFactory.create_user(role=ROLE_VIEWER)
        client = AuthenticatedAPIClient().authenticate_user(viewer)
        self.assertEqual(client.get('/api/v1/users/').status_code, status.HTTP_200_OK)
        response = client.patch(f'/api/v1/users/{viewer.id}/', {'role': ROLE_ADMIN}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_manager_cannot_promote_self(self):
        manager = TestDataFactory.create_user(role=ROLE_MANAGER)
        client = AuthenticatedAPIClient().authenticate_user(manager)
        response = client.patch(f'/api/v1/users/{manager.id}/', {'role': ROLE_ADMIN}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = client.patch(f'/api/v1/users/{manager.id}/', {'permissions': default_permissions(ROLE_ADMIN)}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        manager.refresh_from_db()
        self.assertEqual(manager.role, ROLE_MANAGER)
        self.assertEqual(manager.permissions, default_permissions(ROLE_MANAGER))

    def test_only_admin_grants_admin_role(self):
        manager = TestDataFactory.create_user(role=ROLE_MANAGER)
        client = AuthenticatedAPIClient().authenticate_user(manager)
        user = TestDataFactory.create_user(role=ROLE_VIEWER)
        response = client.patch(f'/api/v1/users/{user.id}/', {'role': ROLE_ADMIN}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        data = {'nama_teknisi': 'Rina', 'nik': 'NIK777', 'email': 'rina@example.com', 'password': 'secret123', 'role': ROLE_ADMIN}
        response = client.post('/api/v1/users/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(User.objects.filter(email='rina@example.com').exists())

        response = client.patch(f'/api/v1/users/{self.admin.id}/', {'role': ROLE_VIEWER}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        response = client.patch(f'/api/v1/users/{user.id}/', {'role': ROLE_TEKNISI}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.patch(f'/api/v1/users/{user.id}/', {'role': ROLE_ADMIN}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_technician_list(self):
        TestDataFactory.create_user(role=ROLE_TEKNISI, nama_teknisi='Joko')
        TestDataFactory.create_user(role=ROLE_VIEWER, nama_teknisi='Tono')
        response = self.client.get('/api/v1/users/technicians/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([t['nama_teknisi'] for t in response.data], ['Joko'])


class AuditLogAPITests(TestCase):

    def test_non_admin_sees_only_own_logs(self):
        admin = TestDataFactory.create_user(role=ROLE_ADMIN)
        viewer = TestDataFactory.create_user(role=ROLE_VIEWER)
        AuditLog.objects.create(user=admin, action='create', model_name='User', object_id='1')
        AuditLog.objects.create(user=viewer, action='update', model_name='User', object_id='2')

        client = AuthenticatedAPIClient().authenticate_user(viewer)
        response = client.get('/api/v1/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

        client.authenticate_user(admin)
        response = client.get('/api/v1/audit-logs/')
        self.assertEqual(response.data['count'], 2)


class ManagementCommandTests(TestCase):

    def test_reset_role_permissions(self):
        user = TestDataFactory.create_user(role=ROLE_MANAGER, permissions={})
        call_command('reset_role_permissions', '--role', ROLE_MANAGER, stdout=StringIO())
        user.refresh_from_db()
        self.assertEqual(user.permissions, default_permissions(ROLE_MANAGER))

    def test_create_admin(self):
        call_command('create_admin', '--email', 'boss@example.com', '--password', 'secret123', '--name', 'Boss', stdout=StringIO())
        user = User.objects.get(email='boss@example.com')
        self.assertEqual(user.username, 'boss')
        self.assertEqual(user.role, ROLE_ADMIN)
        self.assertTrue(user.check_password('secret123'))
        self.assertTrue(all(user.permissions.values()))
