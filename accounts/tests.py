"""
Tests for registration, credentials, tokens and the account endpoints.
"""
from unittest.mock import MagicMock, patch
from urllib.parse import urlencode

import jwt
from django.conf import settings
from django.contrib.auth.hashers import check_password
from django.test import TestCase, override_settings
from rest_framework.test import APITestCase

from accounts.models import User
from accounts.services import register_user, verify_credentials
from accounts.tokens import issue_token, verify_token
from core.exceptions import Forbidden, NotFound, Unauthorized


class CredentialTestCase(TestCase):

    def setUp(self):
        self.user = register_user('Ada', 'Lovelace', 'ada', 'analytical-engine')

    def test_password_is_hashed(self):
        self.assertNotEqual(self.user.password, 'analytical-engine')
        self.assertTrue(check_password('analytical-engine', self.user.password))
        self.assertEqual(self.user.user_permissions, 0)

    def test_verify_credentials(self):
        self.assertEqual(verify_credentials('ada', 'analytical-engine'), self.user)

    def test_wrong_password(self):
        with self.assertRaises(Unauthorized):
            verify_credentials('ada', 'difference-engine')

    def test_unknown_user(self):
        with self.assertRaises(NotFound):
            verify_credentials('babbage', 'analytical-engine')


class TokenTestCase(TestCase):

    def setUp(self):
        self.user = register_user('Ada', 'Lovelace', 'ada', 'analytical-engine')

    def test_round_trip(self):
        claims = verify_token(issue_token(self.user))

        self.assertEqual(claims['userId'], self.user.id)
        self.assertEqual(claims['username'], 'ada')

    def test_tampered_payload_rejected(self):
        """A payload swapped in under the original signature fails."""
        other = register_user('Charles', 'Babbage', 'charles', 'difference-engine')
        header, _, signature = issue_token(self.user).split('.')
        _, other_payload, _ = issue_token(other).split('.')

        with self.assertRaises(Forbidden):
            verify_token(f"{header}.{other_payload}.{signature}")

    def test_wrong_key_rejected(self):
        forged = jwt.encode(
            {'userId': self.user.id, 'username': 'ada', 'exp': 4102444800},
            'another-signing-key-0123456789abcdef0123456789',
            algorithm='HS256'
        )

        with self.assertRaises(Forbidden):
            verify_token(forged)

    def test_unsigned_token_rejected(self):
        unsigned = jwt.encode(
            {'userId': self.user.id, 'username': 'ada', 'exp': 4102444800},
            None,
            algorithm='none'
        )

        with self.assertRaises(Forbidden):
            verify_token(unsigned)

    def test_missing_claims_rejected(self):
        token = jwt.encode({'username': 'ada', 'exp': 4102444800}, settings.JWT_KEY, algorithm='HS256')

        with self.assertRaises(Forbidden):
            verify_token(token)

    @override_settings(JWT_EXPIRATION_SECONDS=-60)
    def test_expired_token_rejected(self):
        with self.assertRaises(Forbidden) as context:
            verify_token(issue_token(self.user))

        self.assertIn('expired', str(context.exception))

    def test_empty_token_rejected(self):
        with self.assertRaises(Forbidden):
            verify_token('')


class AccountApiTestCase(APITestCase):

    def setUp(self):
        self.user = register_user('Ada', 'Lovelace', 'ada', 'analytical-engine')

    def post_form(self, path, data):
        return self.client.post(path, urlencode(data), content_type='application/x-www-form-urlencoded')

    def test_register(self):
        response = self.post_form('/personal', {
            'fname': 'Grace', 'lname': 'Hopper', 'username': 'grace', 'pw': 'cobol'
        })

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.content, b'')
        user = User.objects.get(username='grace')
        self.assertEqual((user.first_name, user.last_name), ('Grace', 'Hopper'))
        self.assertTrue(check_password('cobol', user.password))

    def test_register_multipart(self):
        response = self.client.post('/personal', {
            'fname': 'Alan', 'lname': 'Turing', 'username': 'alan', 'pw': 'enigma'
        })

        self.assertEqual(response.status_code, 200)
        self.assertTrue(User.objects.filter(username='alan').exists())

    def test_register_duplicate_username(self):
        response = self.post_form('/personal', {
            'fname': 'Other', 'lname': 'Ada', 'username': 'ada', 'pw': 'x'
        })

        self.assertEqual(response.status_code, 400)
        self.assertEqual(User.objects.filter(username='ada').count(), 1)

    def test_register_missing_fields(self):
        response = self.post_form('/personal', {'username': 'nobody'})

        self.assertEqual(response.status_code, 400)
        self.assertFalse(User.objects.filter(username='nobody').exists())

    def test_login(self):
        response = self.post_form('/login', {'username': 'ada', 'pw': 'analytical-engine'})

        self.assertEqual(response.status_code, 200)
        claims = verify_token(response.json()['jwtToken'])
        self.assertEqual(claims['userId'], self.user.id)

    def test_login_wrong_password(self):
        response = self.post_form('/login', {'username': 'ada', 'pw': 'wrong'})

        self.assertEqual(response.status_code, 401)
        self.assertNotIn('jwtToken', response.json())

    def test_login_unknown_user(self):
        response = self.post_form('/login', {'username': 'nobody', 'pw': 'x'})

        self.assertEqual(response.status_code, 404)

    def test_personal(self):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_token(self.user)}")

        response = self.client.get('/personal')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {
            'fname': 'Ada',
            'lname': 'Lovelace',
            'username': 'ada',
            'user_permissions': 0,
        })

    def test_personal_without_token(self):
        self.assertEqual(self.client.get('/personal').status_code, 403)

    def test_personal_with_tampered_token(self):
        token = issue_token(self.user)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token[:-4]}AAAA")

        self.assertEqual(self.client.get('/personal').status_code, 403)

    def test_personal_for_deleted_user(self):
        token = issue_token(self.user)
        self.user.delete()
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        self.assertEqual(self.client.get('/personal').status_code, 403)

    def test_register_ignores_bad_token(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer garbage')

        response = self.post_form('/personal', {
            'fname': 'Grace', 'lname': 'Hopper', 'username': 'grace', 'pw': 'cobol'
        })

        self.assertEqual(response.status_code, 200)


@override_settings(RATE_LIMIT_ENABLED=True)
class LoginRateLimitTestCase(APITestCase):

    def setUp(self):
        register_user('Ada', 'Lovelace', 'ada', 'analytical-engine')

    def fake_redis(self, count):
        client = MagicMock()
        client.incr.return_value = count
        client.ttl.return_value = 42
        return client

    def test_limit_exceeded(self):
        client = self.fake_redis(11)
        with patch('core.rate_limiting.get_redis_client', return_value=client):
            response = self.client.post('/login', {'username': 'ada', 'pw': 'analytical-engine'})

        self.assertEqual(response.status_code, 429)
        self.assertEqual(response['Retry-After'], '42')
        self.assertNotIn('jwtToken', response.json())

    def test_under_limit(self):
        client = self.fake_redis(1)
        with patch('core.rate_limiting.get_redis_client', return_value=client):
            response = self.client.post('/login', {'username': 'ada', 'pw': 'analytical-engine'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['X-RateLimit-Remaining'], '9')
        client.expire.assert_called_once()

    def test_redis_unavailable_fails_open(self):
        with patch('core.rate_limiting.get_redis_client', return_value=None):
            response = self.client.post('/login', {'username': 'ada', 'pw': 'analytical-engine'})

        self.assertEqual(response.status_code, 200)
