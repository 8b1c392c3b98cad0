"""
Custom Field Definition View Tests
==================================

Test Coverage:
1. Create (validation, reserved keys, duplicates)
2. List per entity type, oldest first
3. Detail / update / delete scoped to the owner
4. Value pruning is queued when a definition is deleted

Run tests:
    python manage.py test apps.customfields.tests.test_views
"""

import json
from unittest import mock

from django.test import Client, TestCase
from django.urls import reverse

from apps.accounts.models import User
from apps.customfields.models import CustomFieldDefinition


class CustomFieldViewTestCase(TestCase):

    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(email='owner@dealdesk.io', password='testpass123')
        self.other_user = User.objects.create_user(email='other@dealdesk.io', password='testpass123')
        self.client.login(email='owner@dealdesk.io', password='testpass123')

    def post(self, url, data):
        return self.client.post(url, data=json.dumps(data), content_type='application/json')

    def create(self, **data):
        payload = {'entityType': 'contact', 'fieldKey': 'budget', 'label': 'Budget', 'fieldType': 'number'}
        payload.update(data)
        return self.post(reverse('customfields:custom_field_create'), payload)


class CreateCustomFieldTest(CustomFieldViewTestCase):

    def test_create(self):
        response = self.create()
        self.assertEqual(response.status_code, 201)

        data = response.json()
        self.assertEqual(data['customField']['fieldKey'], 'budget')
        self.assertEqual(data['customField']['fieldType'], 'number')
        self.assertTrue(CustomFieldDefinition.objects.filter(owner=self.user, field_key='budget').exists())

    def test_type_defaults_to_text(self):
        response = self.create(fieldKey='segment', fieldType=None)
        self.assertEqual(response.json()['customField']['fieldType'], 'text')

    def test_duplicate_key(self):
        self.create()
        response = self.create(label='Budget again')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['errors']['field_key'], ['A custom field with this key already exists'])

    def test_same_key_allowed_for_other_entity_type_and_owner(self):
        self.create()
        self.assertEqual(self.create(entityType='deal').status_code, 201)

        CustomFieldDefinition.objects.create(owner=self.other_user, entity_type='contact', field_key='segment', label='Segment')
        self.assertEqual(self.create(fieldKey='segment').status_code, 201)

    def test_builtin_column_key_is_rejected(self):
        response = self.create(fieldKey='email')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['errors']['field_key'], ['"email" is a built-in column'])

    def test_row_keys_are_rejected(self):
        for entity_type, key in (('contact', 'id'), ('contact', 'customFields'), ('deal', 'stageLabel'), ('deal', 'contacts')):
            with self.subTest(entity_type=entity_type, key=key):
                response = self.create(entityType=entity_type, fieldKey=key)
                self.assertEqual(response.status_code, 400)
                self.assertIn('field_key', response.json()['errors'])

    def test_invalid_keys(self):
        for key in ('2fast', 'has space', 'a__b', ''):
            with self.subTest(key=key):
                self.assertEqual(self.create(fieldKey=key).status_code, 400)

    def test_invalid_entity_type_and_field_type(self):
        self.assertEqual(self.create(entityType='invoice').status_code, 400)
        self.assertEqual(self.create(fieldType='color').status_code, 400)

    def test_login_required(self):
        self.client.logout()
        self.assertEqual(self.create().status_code, 401)


class ListCustomFieldTest(CustomFieldViewTestCase):

    def test_list_by_entity_type(self):
        self.create(fieldKey='budget')
        self.create(fieldKey='renewal', fieldType='date')
        self.create(entityType='deal', fieldKey='region', fieldType='text')
        CustomFieldDefinition.objects.create(owner=self.other_user, entity_type='contact', field_key='secret', label='Secret')

        response = self.client.get(reverse('customfields:custom_field_list'), {'entityType': 'contact'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual([f['fieldKey'] for f in response.json()['customFields']], ['budget', 'renewal'])

    def test_entity_type_required(self):
        response = self.client.get(reverse('customfields:custom_field_list'))
        self.assertEqual(response.status_code, 400)


class ChangeCustomFieldTest(CustomFieldViewTestCase):

    def setUp(self):
        super().setUp()
        self.definition = CustomFieldDefinition.objects.create(
            owner=self.user, entity_type='contact', field_key='budget', label='Budget', field_type='number',
        )
        self.foreign = CustomFieldDefinition.objects.create(
            owner=self.other_user, entity_type='contact', field_key='budget', label='Budget', field_type='number',
        )

    def test_detail(self):
        response = self.client.get(reverse('customfields:custom_field_detail', args=[self.definition.pk]))
        self.assertEqual(response.json()['customField']['label'], 'Budget')

    def test_other_owners_definition_is_not_found(self):
        self.assertEqual(self.client.get(reverse('customfields:custom_field_detail', args=[self.foreign.pk])).status_code, 404)
        self.assertEqual(self.post(reverse('customfields:custom_field_update', args=[self.foreign.pk]), {'label': 'x'}).status_code, 404)
        self.assertEqual(self.post(reverse('customfields:custom_field_delete', args=[self.foreign.pk]), {}).status_code, 404)

    def test_update_label_keeps_key(self):
        response = self.post(reverse('customfields:custom_field_update', args=[self.definition.pk]), {'label': 'Annual Budget'})
        self.assertEqual(response.status_code, 200)

        self.definition.refresh_from_db()
        self.assertEqual(self.definition.label, 'Annual Budget')
        self.assertEqual(self.definition.field_key, 'budget')
        self.assertEqual(self.definition.field_type, 'number')

    def test_update_requires_label(self):
        response = self.post(reverse('customfields:custom_field_update', args=[self.definition.pk]), {'label': ' '})
        self.assertEqual(response.status_code, 400)

    def test_delete_queues_value_pruning(self):
        url = reverse('customfields:custom_field_delete', args=[self.definition.pk])

        with mock.patch('apps.customfields.signals.prune_custom_field_values') as task:
            with self.captureOnCommitCallbacks(execute=True) as callbacks:
                response = self.post(url, {})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(callbacks), 1)
        task.delay.assert_called_once_with(self.user.id, 'contact', 'budget')
        self.assertFalse(CustomFieldDefinition.objects.filter(pk=self.definition.pk).exists())

    def test_pruning_waits_for_commit(self):
        with mock.patch('apps.customfields.signals.prune_custom_field_values') as task:
            with self.captureOnCommitCallbacks(execute=False):
                self.definition.delete()
            task.delay.assert_not_called()
