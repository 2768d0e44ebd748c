"""
Accounts Views Tests
====================

Test Coverage:
1. Login / Logout
2. Current user (me)
3. Signup (always creates agents)
4. Counselor list, options and creation
5. Role change

Run tests:
    python manage.py test apps.accounts.tests.test_views
"""

import json

from django.test import TestCase, Client
from django.urls import reverse
from django.contrib.auth import get_user_model

from apps.applications.models import Application

User = get_user_model()


def post_json(client, url, data):
    return client.post(url, data=json.dumps(data), content_type='application/json')


class AccountsViewTestCase(TestCase):

    def setUp(self):
        """Setup test data"""
        self.client = Client()

        self.admin = User.objects.create_user(
            email='admin@test.com',
            password='testpass123',
            username='Admin',
            role='admin'
        )

        self.counselor = User.objects.create_counselor(
            email='counselor@test.com',
            password='testpass123',
            username='Mona'
        )

        self.agent = User.objects.create_user(
            email='agent@test.com',
            password='testpass123',
            username='Sara',
        )


class LoginViewTest(AccountsViewTestCase):

    def test_passwords_hashed_with_md5(self):
        self.assertTrue(self.agent.password.startswith('md5$'))
        self.assertTrue(self.agent.check_password('testpass123'))

    def test_login_success(self):
        response = post_json(self.client, reverse('accounts:login'), {
            'email': 'Counselor@Test.com',
            'password': 'testpass123',
        })

        self.assertEqual(response.status_code, 200)
        data = json.loads(response.content)
        self.assertTrue(data['success'])
        self.assertEqual(data['user']['role'], 'counselor')
        self.assertEqual(data['user']['username'], 'Mona')
        self.assertEqual(int(self.client.session['_auth_user_id']), self.counselor.pk)

    def test_login_with_form_data(self):
        response = self.client.post(reverse('accounts:login'), {
            'email': 'agent@test.com',
            'password': 'testpass123',
        })
        self.assertEqual(response.status_code, 200)

    def test_login_wrong_password(self):
        response = post_json(self.client, reverse('accounts:login'), {
            'email': 'agent@test.com',
            'password': 'wrong-password',
        })

        self.assertEqual(response.status_code, 401)
        self.assertFalse(json.loads(response.content)['success'])
        self.assertNotIn('_auth_user_id', self.client.session)

    def test_login_inactive_user(self):
        self.agent.is_active = False
        self.agent.save()

        response = post_json(self.client, reverse('accounts:login'), {
            'email': 'agent@test.com',
            'password': 'testpass123',
        })
        self.assertEqual(response.status_code, 401)

    def test_login_missing_fields(self):
        response = post_json(self.client, reverse('accounts:login'), {'email': 'agent@test.com'})

        self.assertEqual(response.status_code, 400)
        self.assertIn('password', json.loads(response.content)['errors'])

    def test_login_invalid_json(self):
        response = self.client.post(reverse('accounts:login'), data='{not json', content_type='application/json')
        self.assertEqual(response.status_code, 400)

    def test_login_requires_post(self):
        response = self.client.get(reverse('accounts:login'))
        self.assertEqual(response.status_code, 405)


class LogoutViewTest(AccountsViewTestCase):

    def test_logout(self):
        self.client.force_login(self.agent)

        response = self.client.post(reverse('accounts:logout'))

        self.assertEqual(response.status_code, 200)
        self.assertNotIn('_auth_user_id', self.client.session)

    def test_logout_anonymous(self):
        response = self.client.post(reverse('accounts:logout'))
        self.assertEqual(response.status_code, 401)


class MeViewTest(AccountsViewTestCase):

    def test_me_returns_current_user(self):
        self.client.force_login(self.counselor)

        response = self.client.get(reverse('accounts:me'))

        self.assertEqual(response.status_code, 200)
        user = json.loads(response.content)['user']
        self.assertEqual(user['id'], self.counselor.pk)
        self.assertEqual(user['email'], 'counselor@test.com')
        self.assertEqual(user['role'], 'counselor')
        self.assertIn('csrftoken', response.cookies)

    def test_me_superuser_reports_admin_role(self):
        root = User.objects.create_superuser(email='root@test.com', password='testpass123', role='agent')
        self.client.force_login(root)

        response = self.client.get(reverse('accounts:me'))
        self.assertEqual(json.loads(response.content)['user']['role'], 'admin')

    def test_me_display_name_placeholder(self):
        nameless = User.objects.create_user(email='nameless@test.com', password='testpass123')
        self.client.force_login(nameless)

        response = self.client.get(reverse('accounts:me'))
        self.assertEqual(json.loads(response.content)['user']['display_name'], 'Unknown')

    def test_me_anonymous(self):
        response = self.client.get(reverse('accounts:me'))
        self.assertEqual(response.status_code, 401)


class SignupViewTest(AccountsViewTestCase):

    def test_signup_creates_agent(self):
        response = post_json(self.client, reverse('accounts:signup'), {
            'email': 'New.Agent@Test.com',
            'username': 'Omar',
            'password1': 'testpass123',
            'password2': 'testpass123',
            'role': 'admin',  # ignored
        })

        self.assertEqual(response.status_code, 201)
        user = User.objects.get(email='new.agent@test.com')
        self.assertEqual(user.role, 'agent')
        self.assertEqual(user.username, 'Omar')
        self.assertTrue(user.check_password('testpass123'))
        self.assertEqual(int(self.client.session['_auth_user_id']), user.pk)

    def test_signup_password_mismatch(self):
        response = post_json(self.client, reverse('accounts:signup'), {
            'email': 'new@test.com',
            'password1': 'testpass123',
            'password2': 'different123',
        })

        self.assertEqual(response.status_code, 400)
        self.assertIn('password2', json.loads(response.content)['errors'])
        self.assertFalse(User.objects.filter(email='new@test.com').exists())

    def test_signup_short_password(self):
        response = post_json(self.client, reverse('accounts:signup'), {
            'email': 'new@test.com',
            'password1': 'short',
            'password2': 'short',
        })
        self.assertEqual(response.status_code, 400)

    def test_signup_duplicate_email(self):
        response = post_json(self.client, reverse('accounts:signup'), {
            'email': 'agent@test.com',
            'password1': 'testpass123',
            'password2': 'testpass123',
        })

        self.assertEqual(response.status_code, 400)
        self.assertIn('email', json.loads(response.content)['errors'])


class CounselorViewsTest(AccountsViewTestCase):

    def test_counselor_list_admin_only(self):
        self.client.force_login(self.agent)
        response = self.client.get(reverse('accounts:counselor_list'))
        self.assertEqual(response.status_code, 403)

    def test_counselor_list_with_stats(self):
        Application.objects.create(
            client_name='Ali',
            phone_number='+15550001',
            completed_course='science',
            planned_courses=['Nursing'],
            preferred_locations=['Toronto'],
            counselor=self.counselor,
            application_status='processing',
        )
        User.objects.create_counselor(email='idle@test.com', password='testpass123', username='Idle')
        self.client.force_login(self.admin)

        response = self.client.get(reverse('accounts:counselor_list'))

        self.assertEqual(response.status_code, 200)
        counselors = {c['email']: c for c in json.loads(response.content)['counselors']}
        self.assertEqual(counselors['counselor@test.com']['total'], 1)
        self.assertEqual(counselors['counselor@test.com']['processing'], 1)
        self.assertEqual(counselors['idle@test.com']['total'], 0)
        self.assertEqual(counselors['idle@test.com']['completed'], 0)

    def test_counselor_options(self):
        self.client.force_login(self.agent)

        response = self.client.get(reverse('accounts:counselor_options'))

        self.assertEqual(response.status_code, 200)
        options = json.loads(response.content)['counselors']
        self.assertEqual(options, [{'id': self.counselor.pk, 'role': 'counselor', 'username': 'Mona'}])

    def test_counselor_create(self):
        self.client.force_login(self.admin)

        response = post_json(self.client, reverse('accounts:counselor_create'), {
            'email': 'new.counselor@test.com',
            'username': 'Hana',
            'password1': 'testpass123',
            'password2': 'testpass123',
        })

        self.assertEqual(response.status_code, 201)
        self.assertEqual(User.objects.get(email='new.counselor@test.com').role, 'counselor')

    def test_counselor_create_requires_name(self):
        self.client.force_login(self.admin)

        response = post_json(self.client, reverse('accounts:counselor_create'), {
            'email': 'new.counselor@test.com',
            'password1': 'testpass123',
            'password2': 'testpass123',
        })
        self.assertEqual(response.status_code, 400)

    def test_counselor_create_denied_for_counselor(self):
        self.client.force_login(self.counselor)

        response = post_json(self.client, reverse('accounts:counselor_create'), {})
        self.assertEqual(response.status_code, 403)


class UserRoleViewTest(AccountsViewTestCase):

    def test_admin_changes_role(self):
        self.client.force_login(self.admin)

        response = post_json(self.client, reverse('accounts:user_role', args=[self.agent.pk]), {'role': 'counselor'})

        self.assertEqual(response.status_code, 200)
        self.agent.refresh_from_db()
        self.assertEqual(self.agent.role, 'counselor')

    def test_invalid_role(self):
        self.client.force_login(self.admin)

        response = post_json(self.client, reverse('accounts:user_role', args=[self.agent.pk]), {'role': 'owner'})
        self.assertEqual(response.status_code, 400)

    def test_admin_cannot_change_own_role(self):
        self.client.force_login(self.admin)

        response = post_json(self.client, reverse('accounts:user_role', args=[self.admin.pk]), {'role': 'agent'})

        self.assertEqual(response.status_code, 403)
        self.admin.refresh_from_db()
        self.assertEqual(self.admin.role, 'admin')

    def test_non_admin_denied(self):
        self.client.force_login(self.counselor)

        response = post_json(self.client, reverse('accounts:user_role', args=[self.agent.pk]), {'role': 'admin'})

        self.assertEqual(response.status_code, 403)
        self.agent.refresh_from_db()
        self.assertEqual(self.agent.role, 'agent')

    def test_unknown_user(self):
        self.client.force_login(self.admin)

        response = post_json(self.client, reverse('accounts:user_role', args=[999999]), {'role': 'admin'})
        self.assertEqual(response.status_code, 404)
