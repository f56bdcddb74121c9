# core/utils/request_context.py
"""
Helpers that read client context out of a request.
"""
import logging

from django.core.exceptions import DisallowedHost

logger = logging.getLogger(__name__)


def get_client_ip(request):
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def get_user_agent(request):
    return request.META.get('HTTP_USER_AGENT', '')


def get_full_url(request):
    try:
        return request.build_absolute_uri()
    except DisallowedHost:
        return request.get_full_path()


def wants_json(request):
    """
    True for API style callers: an explicit JSON Accept header, an AJAX
    request, or anything under /api/.
    """
    if request.path.startswith('/api/'):
        return True
    if request.headers.get('X-Requested-With') == 'XMLHttpRequest':
        return True
    accept = request.headers.get('Accept', '')
    first = accept.split(',')[0].split(';')[0].strip().lower()
    return first.endswith('/json') or first.endswith('+json')


def get_acting_user(request):
    """The authenticated user on the request, or None."""
    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        return user
    return None
