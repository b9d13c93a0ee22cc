"""
Test suite for the NR / TSN / TSP / SOB registers
"""
from django.test import TestCase
from rest_framework import status

from athena.core.models import AuditLog
from athena.core.permissions import ROLE_ADMIN, ROLE_MANAGER, ROLE_TEKNISI, ROLE_VIEWER
from athena.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from athena.registers.models import Nr, Tsn, Tsp, Sob


class RegisterAPITests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_user(role=ROLE_ADMIN)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_crud_on_every_register(self):
        for path, model in (('nr', Nr), ('tsn', Tsn), ('tsp', Tsp), ('sob', Sob)):
            response = self.client.post(f'/api/v1/{path}/', {'name': f'{path} entry'}, format='json')
            self.assertEqual(response.status_code, status.HTTP_201_CREATED, path)
            entry_id = response.data['id']

            response = self.client.patch(f'/api/v1/{path}/{entry_id}/', {'name': 'renamed'}, format='json')
            self.assertEqual(response.status_code, status.HTTP_200_OK, path)
            self.assertEqual(model.objects.get(pk=entry_id).name, 'renamed')

            response = self.client.delete(f'/api/v1/{path}/{entry_id}/')
            self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT, path)
            self.assertFalse(model.objects.exists())
        self.assertEqual(AuditLog.objects.filter(model_name='Sob').count(), 3)

    def test_blank_name_rejected(self):
        response = self.client.post('/api/v1/nr/', {'name': '  '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_search(self):
        TestDataFactory.create_nr('Network Repair Jakarta')
        TestDataFactory.create_nr('Site Survey')
        response = self.client.get('/api/v1/nr/?search=jakarta')
        self.assertEqual(response.data['count'], 1)

    def test_teknisi_view_only(self):
        entry = TestDataFactory.create_nr()
        teknisi = TestDataFactory.create_user(role=ROLE_TEKNISI)
        client = AuthenticatedAPIClient().authenticate_user(teknisi)
        response = client.get('/api/v1/nr/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['results'][0]['can_edit'])
        response = client.patch(f'/api/v1/nr/{entry.id}/', {'name': 'x'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_manager_edits_but_cannot_delete(self):
        entry = TestDataFactory.create_nr()
        manager = TestDataFactory.create_user(role=ROLE_MANAGER)
        client = AuthenticatedAPIClient().authenticate_user(manager)
        self.assertEqual(client.patch(f'/api/v1/nr/{entry.id}/', {'name': 'x'}, format='json').status_code, status.HTTP_200_OK)
        self.assertEqual(client.delete(f'/api/v1/nr/{entry.id}/').status_code, status.HTTP_403_FORBIDDEN)

    def test_viewer_blocked(self):
        viewer = TestDataFactory.create_user(role=ROLE_VIEWER)
        client = AuthenticatedAPIClient().authenticate_user(viewer)
        self.assertEqual(client.get('/api/v1/sob/').status_code, status.HTTP_403_FORBIDDEN)
