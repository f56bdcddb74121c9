"""
Session Timeout Middleware
"""
import logging

from django.contrib.auth import get_user_model, logout
from django.db import transaction
from django.utils import timezone

from core.security.outcomes import Expired, render_outcome
from core.security.timeout import TimeoutEvaluator
from core.services import audit
from core.services.session_store import session_store

logger = logging.getLogger(__name__)


class SessionTimeoutMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.enforce_timeout(request)
        if response is not None:
            return response
        return self.get_response(request)

    def enforce_timeout(self, request):
        """
        Return None to let the request through, or the response that ends
        it when the session has been idle too long.
        """
        user = getattr(request, 'user', None)
        if user is None or not user.is_authenticated:
            return None

        now = timezone.now()
        decision = TimeoutEvaluator.from_settings().evaluate(request.session, now=now.timestamp())

        if decision.expired:
            return self._expire(request, user, decision, now)

        if decision.persist_user:
            self._touch_user(user, now)
        if decision.persist_session and request.session.session_key:
            session_store.touch(user, request.session.session_key, now)
        return None

    def _expire(self, request, user, decision, now):
        session_key = request.session.session_key
        logger.info(f"Session expired for user {user.pk} after {decision.elapsed:.0f}s idle")

        # Only the request that closes the record audits; a tab that loaded
        # the same session concurrently finds it already closed.
        closed = bool(session_key) and session_store.deactivate(user, session_key, now)
        if closed or not (session_key and session_store.exists(user, session_key)):
            audit.log_session_timeout(user, request=request, idle_seconds=decision.elapsed)
        logout(request)

        return render_outcome(request, Expired())

    def _touch_user(self, user, now):
        try:
            with transaction.atomic():
                get_user_model().objects.filter(pk=user.pk).update(last_activity_at=now)
            user.last_activity_at = now
        except Exception as e:
            logger.error(f"Failed to update last activity for user {user.pk}: {e}")
