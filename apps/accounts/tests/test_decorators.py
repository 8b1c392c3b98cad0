"""
Tests for Custom Decorators
============================

Test Cases:
1. api_login_required decorator
2. json_post_required decorator
"""

import json

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.http import HttpResponse
from django.test import RequestFactory, TestCase

from apps.accounts.decorators import api_login_required, json_post_required

User = get_user_model()


class ApiLoginRequiredDecoratorTest(TestCase):
    """Test @api_login_required decorator"""

    def setUp(self):
        """Setup test data"""
        self.factory = RequestFactory()

        self.user = User.objects.create_user(
            email='owner@dealdesk.io',
            password='testpass123',
            first_name='Sam',
            last_name='Reid',
        )

        @api_login_required
        def dummy_view(request):
            return HttpResponse('Success')

        self.dummy_view = dummy_view

    def test_authenticated_user_allowed(self):
        """Signed-in user should reach the view"""
        request = self.factory.get('/test/')
        request.user = self.user

        response = self.dummy_view(request)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.content, b'Success')

    def test_anonymous_user_gets_401(self):
        """Anonymous user gets a JSON 401, not a redirect"""
        request = self.factory.get('/test/')
        request.user = AnonymousUser()

        response = self.dummy_view(request)

        self.assertEqual(response.status_code, 401)
        self.assertEqual(json.loads(response.content), {'success': False, 'error': 'Authentication required'})

    def test_inactive_user_gets_401(self):
        self.user.is_active = False
        self.user.save()

        request = self.factory.get('/test/')
        request.user = self.user

        self.assertEqual(self.dummy_view(request).status_code, 401)


class JsonPostRequiredDecoratorTest(TestCase):
    """Test @json_post_required decorator"""

    def setUp(self):
        self.factory = RequestFactory()

        @json_post_required
        def dummy_view(request):
            return HttpResponse('Success')

        self.dummy_view = dummy_view

    def test_post_allowed(self):
        response = self.dummy_view(self.factory.post('/test/'))
        self.assertEqual(response.status_code, 200)

    def test_other_methods_get_405(self):
        for method in ('get', 'put', 'delete'):
            with self.subTest(method=method):
                response = self.dummy_view(getattr(self.factory, method)('/test/'))
                self.assertEqual(response.status_code, 405)
                self.assertFalse(json.loads(response.content)['success'])
