"""
Tests for the error taxonomy, the DRF exception handler, the rate limiter
and the environment configuration.
"""
import os
from unittest.mock import MagicMock, patch

import redis
from django.core.exceptions import ImproperlyConfigured
from django.db import OperationalError
from django.test import SimpleTestCase, override_settings
from rest_framework import exceptions
from rest_framework.response import Response
from rest_framework.test import APIRequestFactory

from config.environment import load_environment
from core import rate_limiting
from core.exceptions import (
    Forbidden,
    InsufficientStock,
    InvalidInput,
    NotFound,
    OrderFailed,
    ProductNotFound,
    StoreUnavailable,
    TransactionFailed,
    Unauthorized,
    api_exception_handler,
)


class ExceptionHandlerTestCase(SimpleTestCase):

    def handle(self, exc):
        return api_exception_handler(exc, {'view': None})

    def test_status_codes(self):
        cases = [
            (InvalidInput('bad'), 400),
            (Unauthorized(), 401),
            (Forbidden(), 403),
            (NotFound(), 404),
            (ProductNotFound(3), 404),
            (InsufficientStock(3, 5, 2), 409),
            (StoreUnavailable('down'), 500),
            (TransactionFailed('rolled back'), 500),
            (OrderFailed('Insufficient Stock', 'short'), 500),
        ]
        for exc, expected in cases:
            with self.subTest(exc=type(exc).__name__):
                self.assertEqual(self.handle(exc).status_code, expected)

    def test_body(self):
        response = self.handle(InsufficientStock(3, 5, 2))

        self.assertEqual(response.data, {
            'error': 'Insufficient Stock',
            'detail': 'Insufficient stock for product 3: requested 5, available 2',
        })

    def test_default_detail(self):
        self.assertEqual(self.handle(Forbidden()).data['detail'], 'Forbidden')

    def test_database_error_becomes_store_unavailable(self):
        response = self.handle(OperationalError('canceling statement due to statement timeout'))

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data['error'], 'Store Unavailable')
        self.assertIn('statement timeout', response.data['detail'])

    def test_drf_exceptions_use_default_handler(self):
        response = self.handle(exceptions.ValidationError({'productId': ['required']}))

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'productId': ['required']})

    def test_unknown_exceptions_are_not_handled(self):
        self.assertIsNone(self.handle(RuntimeError('boom')))


class FakeView:

    @rate_limiting.rate_limit(max_requests=2, window_seconds=30)
    def post(self, request):
        return Response({'ok': True})


@override_settings(RATE_LIMIT_ENABLED=True)
class RateLimitTestCase(SimpleTestCase):

    def setUp(self):
        self.request = APIRequestFactory().post('/login', REMOTE_ADDR='10.0.0.1')

    def test_key_per_view_and_client(self):
        client = MagicMock()
        client.incr.return_value = 1
        client.ttl.return_value = 30

        with patch('core.rate_limiting.get_redis_client', return_value=client):
            FakeView().post(self.request)

        client.incr.assert_called_once_with('rate_limit:FakeView.post:10.0.0.1')
        client.expire.assert_called_once_with('rate_limit:FakeView.post:10.0.0.1', 30)

    def test_forwarded_for_header_wins(self):
        request = APIRequestFactory().post('/login', HTTP_X_FORWARDED_FOR='203.0.113.9, 10.0.0.1')

        self.assertEqual(rate_limiting.get_client_ip(request), '203.0.113.9')

    def test_blocks_over_limit(self):
        client = MagicMock()
        client.incr.return_value = 3
        client.ttl.return_value = 12

        with patch('core.rate_limiting.get_redis_client', return_value=client):
            response = FakeView().post(self.request)

        self.assertEqual(response.status_code, 429)
        self.assertEqual(response['X-RateLimit-Remaining'], '0')

    def test_redis_error_fails_open(self):
        client = MagicMock()
        client.incr.side_effect = redis.ConnectionError('gone')

        with patch('core.rate_limiting.get_redis_client', return_value=client):
            response = FakeView().post(self.request)

        self.assertEqual(response.status_code, 200)

    @override_settings(RATE_LIMIT_ENABLED=False)
    def test_disabled(self):
        with patch('core.rate_limiting.get_redis_client') as get_client:
            response = FakeView().post(self.request)

        self.assertEqual(response.status_code, 200)
        get_client.assert_not_called()


REQUIRED_ENVIRONMENT = {
    'DB_HOST': 'db',
    'DB_USERNAME': 'shop',
    'DB_PASSWORD': 'secret',
    'DB_DATABASE': 'shop',
    'PORT': '8080',
    'JWT_KEY': 'signing-key',
}


class EnvironmentTestCase(SimpleTestCase):

    def load(self, **overrides):
        environ = {**REQUIRED_ENVIRONMENT, **overrides}
        environ = {name: value for name, value in environ.items() if value is not None}
        with patch.dict(os.environ, environ, clear=True):
            return load_environment()

    def test_defaults(self):
        env = self.load()

        self.assertEqual((env.port, env.db_port, env.db_timeout_seconds), (8080, 5432, 10))
        self.assertEqual(env.jwt_expiration_seconds, 86400)
        self.assertIsNone(env.django_secret_key)
        self.assertTrue(env.rate_limit_enabled)
        self.assertEqual(env.allowed_hosts, ['*'])

    def test_optional_values(self):
        env = self.load(
            DB_PORT='6432',
            RATE_LIMIT_ENABLED='false',
            DJANGO_ALLOWED_HOSTS='shop.example, api.example',
        )

        self.assertEqual(env.db_port, 6432)
        self.assertFalse(env.rate_limit_enabled)
        self.assertEqual(env.allowed_hosts, ['shop.example', 'api.example'])

    def test_missing_required_values(self):
        for name in REQUIRED_ENVIRONMENT:
            with self.subTest(name=name):
                with self.assertRaises(ImproperlyConfigured) as context:
                    self.load(**{name: None})
                self.assertIn(name, str(context.exception))

    def test_empty_value_counts_as_missing(self):
        with self.assertRaises(ImproperlyConfigured) as context:
            self.load(JWT_KEY='')

        self.assertIn('JWT_KEY', str(context.exception))

    def test_malformed_port(self):
        with self.assertRaises(ImproperlyConfigured) as context:
            self.load(PORT='eighty')

        self.assertIn('PORT', str(context.exception))
