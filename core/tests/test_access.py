# core/tests/test_access.py
import json

from django.contrib.auth.models import AnonymousUser
from django.core.exceptions import PermissionDenied
from django.http import HttpResponse
from django.test import RequestFactory
from django.urls import reverse

from core.models import AuditLog
from core.security.access import check_role, role_required
from core.security.outcomes import (
    Expired, Forbidden, Ok, Outcome, Unauthenticated, render_outcome,
)
from core.views import permission_denied

from .factories import AdminUserFactory, UnitLeaderFactory, UserFactory
from .test_utils import BaseTestCase


class UnauthenticatedAccessTest(BaseTestCase):

    def test_deep_link_as_json(self):
        response = self.get_json(reverse('admin_dashboard'))

        payload = self.assertJSONFailure(response, 401, 'UNAUTHENTICATED')
        self.assertEqual(payload['message'], 'Unauthenticated. Please login to continue.')

        event = AuditLog.objects.get(action=AuditLog.UNAUTHORIZED_ACCESS)
        self.assertIn('/admin/dashboard/', event.url)
        self.assertEqual(event.ip_address, '127.0.0.1')
        self.assertIsNone(event.user)

    def test_deep_link_from_browser_renders_unauthorized_page(self):
        response = self.client.get(reverse('admin_dashboard'), HTTP_REFERER='http://testserver/')

        self.assertEqual(response.status_code, 401)
        self.assertTemplateUsed(response, 'errors/unauthorized.html')
        self.assertContains(response, 'Unauthenticated. Please login to continue.', status_code=401)

        event = AuditLog.objects.get(action=AuditLog.UNAUTHORIZED_ACCESS)
        self.assertEqual(event.details['referer'], 'http://testserver/')

    def test_api_path_is_always_json(self):
        response = self.client.get('/api/admin/login-sessions/')

        self.assertJSONFailure(response, 401, 'UNAUTHENTICATED')

    def test_xhr_is_json(self):
        response = self.client.get(reverse('dashboard'), HTTP_X_REQUESTED_WITH='XMLHttpRequest')

        self.assertJSONFailure(response, 401, 'UNAUTHENTICATED')


class ForbiddenAccessTest(BaseTestCase):

    def test_member_on_admin_route(self):
        member = UserFactory()
        self.client.force_login(member)

        response = self.get_json(reverse('admin_dashboard'))

        payload = self.assertJSONFailure(response, 403, 'ACCESS_DENIED')
        self.assertEqual(
            payload['message'],
            'Access denied. You do not have permission to access this resource.',
        )
        event = AuditLog.objects.get(action=AuditLog.FORBIDDEN_ACCESS)
        self.assertEqual(event.user, member)
        self.assertEqual(event.details['user_id'], member.pk)

    def test_browser_gets_unauthorized_page(self):
        self.client.force_login(UnitLeaderFactory())

        response = self.client.get(reverse('admin_dashboard'))

        self.assertEqual(response.status_code, 403)
        self.assertTemplateUsed(response, 'errors/unauthorized.html')

    def test_admin_is_let_through(self):
        self.client.force_login(AdminUserFactory())

        response = self.get_json(reverse('admin_dashboard'))

        self.assertEqual(response.status_code, 200)
        self.assertTrue(json.loads(response.content)['success'])
        self.assertFalse(AuditLog.objects.filter(action=AuditLog.FORBIDDEN_ACCESS).exists())

    def test_permission_denied_handler_uses_forbidden_code(self):
        request = RequestFactory().get('/reports/', HTTP_ACCEPT='application/json')
        request.user = UserFactory()

        response = permission_denied(request, PermissionDenied())

        self.assertJSONFailure(response, 403, 'FORBIDDEN')
        self.assertEqual(
            AuditLog.objects.get(action=AuditLog.FORBIDDEN_ACCESS).details['code'], 'FORBIDDEN'
        )


class OutcomeTest(BaseTestCase):

    def setUp(self):
        self.factory = RequestFactory()

    def json_request(self, user=None):
        request = self.factory.get('/dashboard/', HTTP_ACCEPT='application/json')
        request.user = user or AnonymousUser()
        return request

    def test_ok_returns_wrapped_response(self):
        response = HttpResponse('fine')

        self.assertIs(render_outcome(self.json_request(), Ok(response)), response)

    def test_expired_json(self):
        response = render_outcome(self.json_request(), Expired())

        self.assertJSONFailure(response, 401, 'SESSION_EXPIRED')

    def test_unknown_outcome_is_rejected(self):
        class Mystery(Outcome):
            kind = 'mystery'

        with self.assertRaises(ValueError):
            render_outcome(self.json_request(), Mystery())

    def test_forbidden_rejects_unknown_code(self):
        with self.assertRaises(ValueError):
            Forbidden('NOPE')

    def test_check_role(self):
        member = UserFactory()

        self.assertIsInstance(check_role(self.json_request()), Unauthenticated)
        self.assertIsNone(check_role(self.json_request(member)))
        self.assertIsNone(check_role(self.json_request(member), [member.role]))
        denied = check_role(self.json_request(member), ['admin'])
        self.assertIsInstance(denied, Forbidden)
        self.assertEqual(denied.code, Forbidden.ACCESS_DENIED)

    def test_view_may_return_an_outcome(self):
        @role_required()
        def view(request):
            return Forbidden(Forbidden.FORBIDDEN)

        response = view(self.json_request(UserFactory()))

        self.assertJSONFailure(response, 403, 'FORBIDDEN')
