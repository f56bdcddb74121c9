# core/models/audit.py
from django.conf import settings
from django.db import models
from django.utils import timezone

from core.exceptions import AppendOnlyViolation


class AuditLog(models.Model):
    """Append-only trail of security relevant events"""

    LOGIN = 'login'
    LOGOUT = 'logout'
    SESSION_TIMEOUT = 'session_timeout'
    UNAUTHORIZED_ACCESS = 'unauthorized_access'
    FORBIDDEN_ACCESS = 'forbidden_access'
    HTTP_ERROR = 'http_error'
    SLOW_QUERY = 'slow_query'

    ACTION_CHOICES = [
        (LOGIN, 'Login'),
        (LOGOUT, 'Logout'),
        (SESSION_TIMEOUT, 'Session Timeout'),
        (UNAUTHORIZED_ACCESS, 'Unauthorized Access'),
        (FORBIDDEN_ACCESS, 'Forbidden Access'),
        (HTTP_ERROR, 'HTTP Error'),
        (SLOW_QUERY, 'Slow Query'),
    ]

    ERROR_ACTIONS = (HTTP_ERROR, SLOW_QUERY)

    LEVEL_INFO = 'info'
    LEVEL_WARNING = 'warning'
    LEVEL_ERROR = 'error'

    LEVEL_CHOICES = [
        (LEVEL_INFO, 'Info'),
        (LEVEL_WARNING, 'Warning'),
        (LEVEL_ERROR, 'Error'),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='audit_logs'
    )
    action = models.CharField(max_length=30, choices=ACTION_CHOICES, db_index=True)
    level = models.CharField(max_length=10, choices=LEVEL_CHOICES, default=LEVEL_INFO)
    description = models.TextField(blank=True)
    url = models.TextField(blank=True, default='')
    ip_address = models.GenericIPAddressField(null=True, blank=True, db_index=True)
    user_agent = models.TextField(blank=True, default='')
    details = models.JSONField(blank=True, default=dict)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ['-created_at', '-id']
        verbose_name = 'Audit Log'
        verbose_name_plural = 'Audit Logs'
        indexes = [
            models.Index(fields=['action', 'created_at'], name='auditlog_action_created_idx'),
            models.Index(fields=['user', 'created_at'], name='auditlog_user_created_idx'),
        ]

    def __str__(self):
        actor = self.user if self.user_id else 'System'
        return f"{actor} - {self.action} - {self.created_at.strftime('%Y-%m-%d %H:%M')}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise AppendOnlyViolation(details={'audit_log_id': self.pk})
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise AppendOnlyViolation(details={'audit_log_id': self.pk})
