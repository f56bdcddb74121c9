# core/tests/test_session_timeout_middleware.py
import time
from datetime import timedelta
from importlib import import_module
from unittest import mock

from django.conf import settings
from django.contrib.messages import get_messages
from django.http import HttpResponse
from django.test import RequestFactory
from django.urls import reverse
from django.utils import timezone

from core.middleware.session_timeout import SessionTimeoutMiddleware
from core.models import AuditLog
from core.security.timeout import LAST_ACTIVITY, LAST_SESSION_UPDATE, LAST_USER_UPDATE
from core.services.session_store import session_store

from .factories import UserFactory
from .test_utils import BaseTestCase

IDLE_PAST_TIMEOUT = 16 * 60


class SessionTimeoutMiddlewareTest(BaseTestCase):

    def setUp(self):
        self.user = UserFactory()
        self.record = self.start_session(self.user)
        self.dashboard_url = reverse('dashboard')

    def test_first_request_sets_markers(self):
        before = time.time()
        response = self.get_json(self.dashboard_url)

        self.assertEqual(response.status_code, 200)
        for key in (LAST_ACTIVITY, LAST_USER_UPDATE, LAST_SESSION_UPDATE):
            self.assertGreaterEqual(self.session_value(key), before)

        self.user.refresh_from_db()
        self.assertIsNotNone(self.user.last_activity_at)
        self.assertGreaterEqual(self.reload(self.record).last_activity_at, self.record.login_at)

    def test_idle_past_timeout_returns_session_expired(self):
        self.get_json(self.dashboard_url)
        self.rewind_activity(IDLE_PAST_TIMEOUT)

        response = self.get_json(self.dashboard_url)

        payload = self.assertJSONFailure(response, 401, 'SESSION_EXPIRED')
        self.assertEqual(payload['message'], 'Session expired. Please login again.')

        record = self.reload(self.record)
        self.assertFalse(record.is_active)
        self.assertIsNotNone(record.logout_at)
        self.assertLess(abs((timezone.now() - record.logout_at).total_seconds()), 60)

        event = AuditLog.objects.get(action=AuditLog.SESSION_TIMEOUT)
        self.assertEqual(event.user, self.user)
        self.assertEqual(event.description, 'Session expired due to inactivity')
        self.assertEqual(event.ip_address, '127.0.0.1')

    def test_expired_request_never_reaches_the_view(self):
        self.get_json(self.dashboard_url)
        self.rewind_activity(IDLE_PAST_TIMEOUT)

        with mock.patch('core.views.base_views.render') as render:
            self.client.get(self.dashboard_url)

        render.assert_not_called()

    def test_expiry_logs_the_user_out(self):
        self.get_json(self.dashboard_url)
        self.rewind_activity(IDLE_PAST_TIMEOUT)
        self.get_json(self.dashboard_url)

        self.assertNotIn('_auth_user_id', self.client.session)

        response = self.get_json(self.dashboard_url)
        self.assertJSONFailure(response, 401, 'UNAUTHENTICATED')

    def test_repeated_late_requests_time_out_once(self):
        self.get_json(self.dashboard_url)
        self.rewind_activity(IDLE_PAST_TIMEOUT)

        for _ in range(3):
            self.get_json(self.dashboard_url)

        self.assertEqual(AuditLog.objects.filter(action=AuditLog.SESSION_TIMEOUT).count(), 1)
        self.assertFalse(self.reload(self.record).is_active)

    def test_browser_is_redirected_to_login_with_message(self):
        self.client.get(self.dashboard_url)
        self.rewind_activity(IDLE_PAST_TIMEOUT)

        response = self.client.get(self.dashboard_url)

        self.assertResponseRedirect(response, reverse('login'))
        messages = [str(m) for m in get_messages(response.wsgi_request)]
        self.assertIn('Session expired due to inactivity. Please login again.', messages)

    def test_activity_within_timeout_keeps_session_alive(self):
        self.get_json(self.dashboard_url)
        self.rewind_activity(14 * 60)

        response = self.get_json(self.dashboard_url)

        self.assertEqual(response.status_code, 200)
        self.assertTrue(self.reload(self.record).is_active)

    def test_continuous_activity_for_an_hour(self):
        self.get_json(self.dashboard_url)

        with mock.patch.object(session_store, 'touch', wraps=session_store.touch) as touch:
            for _ in range(12):
                self.rewind_activity(5 * 60)
                response = self.get_json(self.dashboard_url)
                self.assertEqual(response.status_code, 200)

        self.assertEqual(touch.call_count, 12)
        self.assertFalse(AuditLog.objects.filter(action=AuditLog.SESSION_TIMEOUT).exists())

    def test_writes_are_throttled_within_window(self):
        self.get_json(self.dashboard_url)

        with mock.patch.object(session_store, 'touch', wraps=session_store.touch) as touch, \
                mock.patch.object(SessionTimeoutMiddleware, '_touch_user') as touch_user:
            for _ in range(10):
                self.rewind_activity(20)
                self.get_json(self.dashboard_url)

        touch.assert_not_called()
        touch_user.assert_not_called()

    def test_persisted_activity_moves_after_window(self):
        self.get_json(self.dashboard_url)
        stale = timezone.now() - timedelta(hours=1)
        type(self.user).objects.filter(pk=self.user.pk).update(last_activity_at=stale)

        self.rewind_activity(5 * 60)
        self.get_json(self.dashboard_url)

        self.user.refresh_from_db()
        self.assertGreater(self.user.last_activity_at, stale)

    def test_duplicate_tab_after_expiry_is_not_served(self):
        cookie_name = settings.SESSION_COOKIE_NAME
        other_tab = self.client_class()
        other_tab.cookies[cookie_name] = self.client.cookies[cookie_name].value

        self.get_json(self.dashboard_url)
        self.rewind_activity(15 * 60 + 1)

        first = self.get_json(self.dashboard_url)
        second = self.get_json(self.dashboard_url, client=other_tab)

        self.assertJSONFailure(first, 401, 'SESSION_EXPIRED')
        self.assertEqual(second.status_code, 401)
        self.assertFalse(self.reload(self.record).is_active)

    def test_tabs_loading_session_together_time_out_once(self):
        self.get_json(self.dashboard_url)
        self.rewind_activity(IDLE_PAST_TIMEOUT)
        session_key = self.client.session.session_key
        session_engine = import_module(settings.SESSION_ENGINE)

        tabs = []
        for _ in range(2):
            request = RequestFactory().get(self.dashboard_url, HTTP_ACCEPT='application/json')
            request.user = self.user
            request.session = session_engine.SessionStore(session_key=session_key)
            self.assertIsNotNone(request.session.get(LAST_ACTIVITY))
            tabs.append(request)

        middleware = SessionTimeoutMiddleware(lambda request: HttpResponse())
        responses = [middleware.enforce_timeout(request) for request in tabs]

        for response in responses:
            self.assertJSONFailure(response, 401, 'SESSION_EXPIRED')
        self.assertEqual(AuditLog.objects.filter(action=AuditLog.SESSION_TIMEOUT).count(), 1)
        self.assertFalse(self.reload(self.record).is_active)

    def test_expiry_without_login_record_still_logs_out(self):
        self.record.delete()
        self.get_json(self.dashboard_url)
        self.rewind_activity(IDLE_PAST_TIMEOUT)

        response = self.get_json(self.dashboard_url)

        self.assertJSONFailure(response, 401, 'SESSION_EXPIRED')
        self.assertEqual(AuditLog.objects.filter(action=AuditLog.SESSION_TIMEOUT).count(), 1)

    def test_anonymous_requests_are_not_tracked(self):
        self.client.logout()

        self.get_json(self.dashboard_url)

        self.assertIsNone(self.session_value(LAST_ACTIVITY))

    def test_failed_user_write_does_not_break_request(self):
        with mock.patch('core.middleware.session_timeout.get_user_model') as get_user_model:
            get_user_model.return_value.objects.filter.side_effect = RuntimeError('database is locked')
            response = self.get_json(self.dashboard_url)

        self.assertEqual(response.status_code, 200)
