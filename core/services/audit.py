# core/services/audit.py
"""
Audit logger.

Every call is fire-and-forget: a failed write is reported on this module's
logger and swallowed so the request that triggered it carries on.
"""
import logging

from django.db import transaction

from core.exceptions import AuditWriteError
from core.models import AuditLog
from core.utils.request_context import get_client_ip, get_full_url, get_user_agent

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    AuditLog.LEVEL_INFO: logging.INFO,
    AuditLog.LEVEL_WARNING: logging.WARNING,
    AuditLog.LEVEL_ERROR: logging.ERROR,
}


def record(action, actor=None, description='', request=None, level=AuditLog.LEVEL_INFO, details=None):
    """
    Append one audit event. Returns the saved AuditLog, or None when the
    write failed.
    """
    try:
        return _write(action, actor, description, request, level, details)
    except Exception as e:
        logger.error(
            f"Failed to record audit event '{action}': {e}",
            extra={'action': action, 'description': description},
        )
        return None


def _write(action, actor, description, request, level, details):
    if actor is not None and not getattr(actor, 'is_authenticated', False):
        actor = None

    event = AuditLog(
        user=actor,
        action=action,
        level=level,
        description=description,
        details=details or {},
    )
    if request is not None:
        event.url = get_full_url(request)
        event.ip_address = get_client_ip(request)
        event.user_agent = get_user_agent(request)

    try:
        with transaction.atomic():
            event.save()
    except Exception as e:
        raise AuditWriteError(str(e), action=action) from e

    logger.log(
        _LOG_LEVELS.get(level, logging.INFO),
        f"{action}: {description} | User: {actor.pk if actor else 'System'} | IP: {event.ip_address}",
    )
    return event


# ===== EVENT HELPERS =====

def log_login(user, request=None):
    return record(
        AuditLog.LOGIN,
        actor=user,
        description=f"User {user} logged in successfully",
        request=request,
        details={'user_role': user.role},
    )


def log_logout(user, request=None, description=None, details=None):
    return record(
        AuditLog.LOGOUT,
        actor=user,
        description=description or f"User {user} logged out",
        request=request,
        details=details or {'user_role': user.role},
    )


def log_session_timeout(user, request=None, idle_seconds=None):
    return record(
        AuditLog.SESSION_TIMEOUT,
        actor=user,
        description='Session expired due to inactivity',
        request=request,
        level=AuditLog.LEVEL_WARNING,
        details={'idle_seconds': round(idle_seconds) if idle_seconds is not None else None},
    )


def log_unauthorized_access(request):
    return record(
        AuditLog.UNAUTHORIZED_ACCESS,
        description='Unauthorized access attempt',
        request=request,
        level=AuditLog.LEVEL_WARNING,
        details={'referer': request.META.get('HTTP_REFERER', '')},
    )


def log_forbidden_access(request, code):
    user = getattr(request, 'user', None)
    return record(
        AuditLog.FORBIDDEN_ACCESS,
        actor=user,
        description='Access denied attempt' if code == 'ACCESS_DENIED' else 'Forbidden access attempt',
        request=request,
        level=AuditLog.LEVEL_WARNING,
        details={
            'code': code,
            'user_id': user.pk if user is not None and user.is_authenticated else None,
        },
    )


HTTP_ERROR_MESSAGES = {
    401: 'Unauthorized access',
    403: 'Access forbidden',
    404: 'Page not found',
    500: 'Internal server error',
    502: 'Bad gateway',
    503: 'Service unavailable',
}


def log_http_error(request, status_code, user=None):
    message = HTTP_ERROR_MESSAGES.get(status_code, f'HTTP error {status_code}')
    return record(
        AuditLog.HTTP_ERROR,
        actor=user,
        description=message,
        request=request,
        level=AuditLog.LEVEL_ERROR if status_code >= 500 else AuditLog.LEVEL_WARNING,
        details={
            'status_code': status_code,
            'method': request.method,
            'url': get_full_url(request),
            'user_id': user.pk if user is not None else None,
        },
    )


def log_slow_query(request, sql, duration_ms, user=None):
    return record(
        AuditLog.SLOW_QUERY,
        actor=user,
        description=f"Slow database query detected: {duration_ms:.0f}ms",
        request=request,
        level=AuditLog.LEVEL_WARNING,
        details={'sql': sql, 'time_ms': round(duration_ms, 2)},
    )
