# core/tests/test_utils.py
import json

from django.test import TestCase

from core.models import LoginSession
from core.security.timeout import LAST_ACTIVITY, LAST_SESSION_UPDATE, LAST_USER_UPDATE

from .factories import LoginSessionFactory

JSON_HEADERS = {'HTTP_ACCEPT': 'application/json'}


class BaseTestCase(TestCase):
    """Base test case with common utilities"""

    def start_session(self, user, client=None):
        """Log ``user`` in on ``client`` and open the matching login record."""
        client = client or self.client
        client.force_login(user)
        return LoginSessionFactory(user=user, session_key=client.session.session_key)

    def get_json(self, url, client=None, **extra):
        client = client or self.client
        return client.get(url, **JSON_HEADERS, **extra)

    def post_json(self, url, data=None, client=None, **extra):
        client = client or self.client
        return client.post(url, data or {}, **JSON_HEADERS, **extra)

    def rewind_activity(self, seconds, client=None):
        """Pretend ``seconds`` passed since the session's last request."""
        client = client or self.client
        session = client.session
        for key in (LAST_ACTIVITY, LAST_USER_UPDATE, LAST_SESSION_UPDATE):
            if session.get(key) is not None:
                session[key] = session[key] - seconds
        session.save()

    def session_value(self, key, client=None):
        return (client or self.client).session.get(key)

    def reload(self, obj):
        obj.refresh_from_db()
        return obj

    def assertJSONFailure(self, response, status, code):
        self.assertEqual(response.status_code, status)
        payload = json.loads(response.content)
        self.assertFalse(payload['success'])
        self.assertEqual(payload['code'], code)
        return payload

    def assertResponseRedirect(self, response, expected_url=None):
        """Assert response is a redirect"""
        self.assertEqual(response.status_code, 302)
        if expected_url:
            self.assertEqual(response.url, expected_url)

    def active_records(self, user):
        return LoginSession.objects.filter(user=user, is_active=True)
