"""
Login session records.

One row per authenticated session, keyed by (user, session_key). Rows are
deactivated on logout, timeout or forced logout and are never deleted so
the history stays available to the monitoring API.
"""
import logging
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

logger = logging.getLogger(__name__)


class LoginSessionQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def for_user(self, user):
        return self.filter(user=user)

    def for_token(self, user, session_key):
        """Always scope by both owner and token."""
        return self.filter(user=user, session_key=session_key)

    def recent(self, days=7):
        return self.filter(login_at__gte=timezone.now() - timedelta(days=days))


class LoginSession(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='login_sessions')
    session_key = models.CharField(max_length=40, db_index=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True, default='')
    is_active = models.BooleanField(default=True)
    forced_logout = models.BooleanField(default=False)
    login_at = models.DateTimeField(default=timezone.now, db_index=True)
    last_activity_at = models.DateTimeField(null=True, blank=True)
    logout_at = models.DateTimeField(null=True, blank=True)

    objects = LoginSessionQuerySet.as_manager()

    class Meta:
        ordering = ['-login_at']
        verbose_name = 'Login Session'
        verbose_name_plural = 'Login Sessions'
        indexes = [
            models.Index(fields=['user', 'is_active'], name='loginsession_user_active_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'session_key'],
                condition=Q(is_active=True),
                name='unique_active_login_session',
            ),
        ]

    def __str__(self):
        state = 'active' if self.is_active else 'closed'
        return f"{self.user} - {self.login_at.strftime('%Y-%m-%d %H:%M')} ({state})"

    @property
    def duration(self):
        """Length of a closed session, None while it is still active."""
        if self.logout_at is None:
            return None
        return self.logout_at - self.login_at

    def deactivate(self, at=None, forced=False):
        """
        Close this session. Returns False when it was already closed;
        the conditional update keeps concurrent callers from both winning.
        """
        at = at or timezone.now()
        changes = {'is_active': False, 'logout_at': at}
        if forced:
            changes['forced_logout'] = True
        updated = type(self).objects.filter(pk=self.pk, is_active=True).update(**changes)
        if updated:
            for field, value in changes.items():
                setattr(self, field, value)
        return bool(updated)
