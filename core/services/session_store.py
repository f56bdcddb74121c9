# core/services/session_store.py
"""
Login session store.

Thin data access over LoginSession. Every query is scoped by both the
owning user and the session token. Writes never raise: failures are logged
and reported through the return value.
"""
import logging

from django.db import transaction
from django.utils import timezone

from core.exceptions import SessionStoreError
from core.models import LoginSession
from core.utils.request_context import get_client_ip, get_user_agent

logger = logging.getLogger(__name__)


class LoginSessionStore:

    def create(self, user, session_key, request=None, at=None):
        """Open a session record at login. Returns it, or None on failure."""
        at = at or timezone.now()
        try:
            with transaction.atomic():
                # Keep at most one active row per (user, token)
                LoginSession.objects.for_token(user, session_key).active().update(
                    is_active=False, logout_at=at
                )
                return LoginSession.objects.create(
                    user=user,
                    session_key=session_key,
                    ip_address=get_client_ip(request) if request is not None else None,
                    user_agent=get_user_agent(request) if request is not None else '',
                    is_active=True,
                    login_at=at,
                    last_activity_at=at,
                )
        except Exception as e:
            self._report(SessionStoreError(str(e), operation='create', user=user))
            return None

    def touch(self, user, session_key, at=None):
        """Refresh last_activity_at. Missing records are a silent no-op."""
        at = at or timezone.now()
        try:
            with transaction.atomic():
                updated = LoginSession.objects.for_token(user, session_key).active().update(
                    last_activity_at=at
                )
            return updated > 0
        except Exception as e:
            self._report(SessionStoreError(str(e), operation='touch', user=user))
            return False

    def deactivate(self, user, session_key, at=None):
        """
        Close the active record. Returns True only for the call that
        actually closed it; repeated calls are no-ops.
        """
        at = at or timezone.now()
        try:
            with transaction.atomic():
                updated = LoginSession.objects.for_token(user, session_key).active().update(
                    is_active=False, logout_at=at
                )
            return updated > 0
        except Exception as e:
            self._report(SessionStoreError(str(e), operation='deactivate', user=user))
            return False

    def exists(self, user, session_key):
        """True when any record, active or not, exists for this token."""
        try:
            return LoginSession.objects.for_token(user, session_key).exists()
        except Exception as e:
            self._report(SessionStoreError(str(e), operation='exists', user=user))
            return False

    def _report(self, error):
        logger.error(
            f"Login session {error.operation} failed for user "
            f"{getattr(error.user, 'pk', None)}: {error.message}"
        )


session_store = LoginSessionStore()
