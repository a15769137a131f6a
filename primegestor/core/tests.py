"""
Tests for authentication, user administration, activity logs and support
"""
from datetime import timedelta

from django.core import mail
from django.core.management import call_command
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework import status

from primegestor.core.models import ActivityLog, User
from primegestor.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from primegestor.core.utils import log_activity


class UserModelTests(TestCase):

    def test_create_user_uses_email_as_username(self):
        user = User.objects.create_user(email='ana@test.com', password='secret1', full_name='Ana')
        self.assertEqual(user.username, 'ana@test.com')
        self.assertEqual(user.role, User.ROLE_EMPLOYEE)
        self.assertTrue(user.check_password('secret1'))

    def test_superuser_gets_admin_role(self):
        user = User.objects.create_superuser(email='root@test.com', password='secret1', full_name='Root')
        self.assertEqual(user.role, User.ROLE_ADMIN)
        self.assertTrue(user.is_admin)

    def test_reset_token_validity(self):
        user = TestDataFactory.create_user()
        user.reset_token = 'abc'
        user.reset_token_expiry = timezone.now() + timedelta(minutes=5)
        self.assertTrue(user.has_valid_reset_token('abc'))
        self.assertFalse(user.has_valid_reset_token('other'))
        user.reset_token_expiry = timezone.now() - timedelta(minutes=1)
        self.assertFalse(user.has_valid_reset_token('abc'))


class AuthAPITests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.user = TestDataFactory.create_user(email='joao@test.com', password='secret123', full_name='João')

    def test_login_returns_tokens_and_user(self):
        response = self.client.post('/api/auth/login/', {'email': 'joao@test.com', 'password': 'secret123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['email'], 'joao@test.com')
        self.assertNotIn('password', response.data['user'])

    def test_login_with_wrong_password(self):
        response = self.client.post('/api/auth/login/', {'email': 'joao@test.com', 'password': 'nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_inactive_user_cannot_login(self):
        TestDataFactory.create_user(email='off@test.com', password='secret123', is_active=False)
        response = self.client.post('/api/auth/login/', {'email': 'off@test.com', 'password': 'secret123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_ignores_email_case(self):
        TestDataFactory.create_user(email='Ana@Test.com', password='secret123')
        response = self.client.post('/api/auth/login/', {'email': 'ana@test.com', 'password': 'secret123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['user']['email'], 'Ana@Test.com')

    def test_refresh_token(self):
        login = self.client.post('/api/auth/login/', {'email': 'joao@test.com', 'password': 'secret123'}, format='json')
        response = self.client.post('/api/auth/refresh/', {'refresh': login.data['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_me_requires_authentication(self):
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me(self):
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['full_name'], 'João')
        self.assertFalse(response.data['is_admin'])


@override_settings(APP_URL='http://app.test')
class PasswordResetTests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.user = TestDataFactory.create_user(email='maria@test.com', password='oldpass1')

    def test_forgot_password_unknown_email(self):
        response = self.client.post('/api/auth/forgot-password/', {'email': 'ghost@test.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(len(mail.outbox), 0)

    def test_forgot_password_sends_link(self):
        response = self.client.post('/api/auth/forgot-password/', {'email': 'maria@test.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertTrue(self.user.reset_token)
        self.assertGreater(self.user.reset_token_expiry, timezone.now())
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn(f'http://app.test/reset-password?token={self.user.reset_token}', mail.outbox[0].body)

    def test_reset_password_with_token(self):
        self.client.post('/api/auth/forgot-password/', {'email': 'maria@test.com'}, format='json')
        self.user.refresh_from_db()
        response = self.client.post('/api/auth/reset-password/', {
            'token': self.user.reset_token, 'new_password': 'newpass1'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('newpass1'))
        self.assertIsNone(self.user.reset_token)

    def test_reset_password_expired_token(self):
        self.user.reset_token = 'expired-token'
        self.user.reset_token_expiry = timezone.now() - timedelta(hours=2)
        self.user.save()
        response = self.client.post('/api/auth/reset-password/', {
            'token': 'expired-token', 'new_password': 'newpass1'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_reset_password_too_short(self):
        response = self.client.post('/api/auth/reset-password/', {'token': 'x', 'new_password': '123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class UserAdministrationTests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.employee = TestDataFactory.create_user(password='emppass1')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_list_users(self):
        response = self.client.get('/api/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_employee_cannot_list_users(self):
        self.client.authenticate_user(self.employee)
        response = self.client.get('/api/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_create_user(self):
        response = self.client.post('/api/users/', {
            'full_name': 'Novo Usuário', 'email': 'novo@test.com', 'password': 'secret1', 'role': 'employee'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertNotIn('password', response.data)
        user = User.objects.get(email='novo@test.com')
        self.assertTrue(user.check_password('secret1'))
        self.assertTrue(ActivityLog.objects.filter(action='CREATE', entity_type='USER', entity_id=str(user.id)).exists())

    def test_create_user_duplicate_email(self):
        response = self.client.post('/api/users/', {
            'full_name': 'Dup', 'email': self.employee.email, 'password': 'secret1'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_change_email_frees_old_address(self):
        old_email = self.employee.email
        response = self.client.patch(f'/api/users/{self.employee.id}/', {'email': 'trocado@test.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.employee.refresh_from_db()
        self.assertEqual(self.employee.username, 'trocado@test.com')

        response = self.client.post('/api/users/', {
            'full_name': 'Reaproveitado', 'email': old_email, 'password': 'secret1'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_change_email_to_existing_address(self):
        response = self.client.patch(f'/api/users/{self.employee.id}/', {'email': self.admin.email.upper()}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_user_role(self):
        response = self.client.patch(f'/api/users/{self.employee.id}/', {'role': 'admin'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.employee.refresh_from_db()
        self.assertEqual(self.employee.role, 'admin')

    def test_delete_user(self):
        response = self.client.delete(f'/api/users/{self.employee.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(User.objects.filter(pk=self.employee.id).exists())

    def test_cannot_delete_self(self):
        response = self.client.delete(f'/api/users/{self.admin.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(User.objects.filter(pk=self.admin.id).exists())

    def test_admin_reset_password(self):
        response = self.client.post('/api/users/reset-password/', {
            'user_id': self.employee.id, 'new_password': 'brandnew1'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.employee.refresh_from_db()
        self.assertTrue(self.employee.check_password('brandnew1'))

    def test_change_password(self):
        self.client.authenticate_user(self.employee)
        response = self.client.post('/api/users/change-password/', {
            'current_password': 'emppass1', 'new_password': 'changed1'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.employee.refresh_from_db()
        self.assertTrue(self.employee.check_password('changed1'))

    def test_change_password_wrong_current(self):
        self.client.authenticate_user(self.employee)
        response = self.client.post('/api/users/change-password/', {
            'current_password': 'wrong', 'new_password': 'changed1'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class ActivityLogTests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_log_activity_without_required_fields(self):
        self.assertIsNone(log_activity(user=self.admin, action=None, entity_type='PRODUCT'))
        self.assertEqual(ActivityLog.objects.count(), 0)

    def test_filter_logs(self):
        log_activity(user=self.admin, action='CREATE', entity_type='PRODUCT', entity_id=1, entity_name='Caneta')
        log_activity(user=self.admin, action='DELETE', entity_type='CUSTOMER', entity_id=2, entity_name='Cliente')
        response = self.client.get('/api/logs/', {'action': 'create'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['entity_name'], 'Caneta')
        self.assertEqual(response.data[0]['user']['email'], self.admin.email)

    def test_filter_logs_by_date(self):
        log_activity(user=self.admin, action='CREATE', entity_type='PRODUCT', entity_id=1, entity_name='Caneta')
        old = log_activity(user=self.admin, action='CREATE', entity_type='PRODUCT', entity_id=2, entity_name='Lápis')
        ActivityLog.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(days=10))
        today = timezone.localdate().isoformat()
        response = self.client.get('/api/logs/', {'date_from': today, 'date_to': today})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([log['entity_name'] for log in response.data], ['Caneta'])

    def test_invalid_log_date_is_rejected(self):
        response = self.client.get('/api/logs/', {'date_from': 'yesterday'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('date_from', response.data)

    def test_logs_limited_to_most_recent(self):
        ActivityLog.objects.bulk_create([
            ActivityLog(user=self.admin, action='UPDATE', entity_type='PRODUCT', entity_id=str(i))
            for i in range(105)
        ])
        response = self.client.get('/api/logs/')
        self.assertEqual(len(response.data), 100)

    def test_logs_admin_only(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.get('/api/logs/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class SupportAndDocumentationTests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()

    @override_settings(SUPPORT_EMAIL='support@test.com')
    def test_support_request_is_mailed(self):
        response = self.client.post('/api/support/', {
            'name': 'Carla', 'email': 'carla@test.com', 'subject': 'Ajuda', 'message': 'Não consigo entrar'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['support@test.com'])
        self.assertEqual(mail.outbox[0].reply_to, ['carla@test.com'])

    @override_settings(SUPPORT_EMAIL='')
    def test_support_request_without_mailbox(self):
        response = self.client.post('/api/support/', {
            'name': 'Carla', 'email': 'carla@test.com', 'subject': 'Ajuda', 'message': 'Oi'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)

    def test_support_request_invalid_email(self):
        response = self.client.post('/api/support/', {
            'name': 'Carla', 'email': 'not-an-email', 'subject': 'Ajuda', 'message': 'Oi'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_documentation_returns_readme(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.get('/api/documentation/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('PrimeGestor', response.data['content'])


class SeedAdminCommandTests(TestCase):

    def test_seed_admin_is_idempotent(self):
        call_command('seed_admin', email='boss@test.com', password='bosspass')
        call_command('seed_admin', email='boss@test.com', password='bosspass')
        admin = User.objects.get(email='boss@test.com')
        self.assertEqual(admin.role, User.ROLE_ADMIN)
        self.assertTrue(admin.check_password('bosspass'))
        self.assertEqual(User.objects.filter(email='boss@test.com').count(), 1)
