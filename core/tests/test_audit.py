# core/tests/test_audit.py
from unittest import mock

from django.contrib.auth.models import AnonymousUser
from django.db import DatabaseError
from django.test import RequestFactory

from core.exceptions import AppendOnlyViolation
from core.models import AuditLog
from core.services import audit

from .factories import AuditLogFactory, UserFactory
from .test_utils import BaseTestCase


class AuditRecordTest(BaseTestCase):

    def setUp(self):
        self.factory = RequestFactory()
        self.user = UserFactory()

    def test_record_captures_request_context(self):
        request = self.factory.get(
            '/admin/dashboard/?tab=logs',
            HTTP_USER_AGENT='Mozilla/5.0',
            HTTP_X_FORWARDED_FOR='41.186.1.1, 10.0.0.1',
        )

        event = audit.record(AuditLog.LOGIN, actor=self.user, description='hello', request=request)

        self.assertEqual(event.user, self.user)
        self.assertEqual(event.url, 'http://testserver/admin/dashboard/?tab=logs')
        self.assertEqual(event.ip_address, '41.186.1.1')
        self.assertEqual(event.user_agent, 'Mozilla/5.0')
        self.assertEqual(event.level, AuditLog.LEVEL_INFO)

    def test_record_without_actor_or_request(self):
        event = audit.record(AuditLog.SLOW_QUERY, description='system')

        self.assertIsNone(event.user)
        self.assertEqual(event.url, '')
        self.assertIsNone(event.ip_address)

    def test_anonymous_actor_is_stored_as_system(self):
        event = audit.record(AuditLog.UNAUTHORIZED_ACCESS, actor=AnonymousUser())

        self.assertIsNone(event.user)

    def test_write_failure_is_swallowed_and_logged(self):
        with mock.patch.object(AuditLog, 'save', side_effect=DatabaseError('disk full')), \
                mock.patch('core.services.audit.logger') as logger:
            result = audit.record(AuditLog.LOGIN, actor=self.user)

        self.assertIsNone(result)
        logger.error.assert_called_once()
        self.assertFalse(AuditLog.objects.exists())

    def test_log_session_timeout(self):
        event = audit.log_session_timeout(self.user, idle_seconds=960.4)

        self.assertEqual(event.action, AuditLog.SESSION_TIMEOUT)
        self.assertEqual(event.level, AuditLog.LEVEL_WARNING)
        self.assertEqual(event.details, {'idle_seconds': 960})

    def test_log_unauthorized_access_keeps_referer(self):
        request = self.factory.get('/admin/dashboard/', HTTP_REFERER='http://testserver/')
        request.user = AnonymousUser()

        event = audit.log_unauthorized_access(request)

        self.assertIsNone(event.user)
        self.assertEqual(event.details['referer'], 'http://testserver/')

    def test_log_forbidden_access_keeps_user_id(self):
        request = self.factory.get('/admin/dashboard/')
        request.user = self.user

        event = audit.log_forbidden_access(request, 'ACCESS_DENIED')

        self.assertEqual(event.user, self.user)
        self.assertEqual(event.details, {'code': 'ACCESS_DENIED', 'user_id': self.user.pk})

    def test_log_http_error(self):
        request = self.factory.post('/accounts/login/')

        event = audit.log_http_error(request, 503)

        self.assertEqual(event.description, 'Service unavailable')
        self.assertEqual(event.level, AuditLog.LEVEL_ERROR)
        self.assertEqual(event.details['status_code'], 503)
        self.assertEqual(event.details['method'], 'POST')
        self.assertIsNone(event.details['user_id'])


class AuditLogAppendOnlyTest(BaseTestCase):

    def test_existing_events_cannot_be_changed(self):
        event = AuditLogFactory()
        event.description = 'rewritten'

        with self.assertRaises(AppendOnlyViolation):
            event.save()

        self.assertEqual(AuditLog.objects.get(pk=event.pk).description, 'Test event')

    def test_events_cannot_be_deleted(self):
        event = AuditLogFactory()

        with self.assertRaises(AppendOnlyViolation):
            event.delete()

        self.assertTrue(AuditLog.objects.filter(pk=event.pk).exists())

    def test_newest_first(self):
        first = AuditLogFactory()
        second = AuditLogFactory(created_at=first.created_at)

        self.assertEqual(list(AuditLog.objects.all()), [second, first])
