# core/api/exception_handlers.py
"""
REST framework exception handler.

Authentication and permission failures are rendered through the same
outcome switch as the HTML views so the JSON contract is identical.
"""
import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from rest_framework import exceptions
from rest_framework.views import exception_handler

from core.security.outcomes import Forbidden, Unauthenticated, render_outcome

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    request = context['request']
    django_request = getattr(request, '_request', request)

    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        return render_outcome(django_request, Unauthenticated())

    if isinstance(exc, (exceptions.PermissionDenied, DjangoPermissionDenied)):
        return render_outcome(django_request, Forbidden(Forbidden.ACCESS_DENIED))

    response = exception_handler(exc, context)
    if response is None:
        return None

    detail = response.data.get('detail') if isinstance(response.data, dict) else None
    data = {
        'success': False,
        'message': str(detail) if detail else 'The request could not be processed.',
    }
    if detail is None:
        data['errors'] = response.data
    response.data = data
    logger.info(f"API error {response.status_code} on {django_request.path}: {response.data['message']}")
    return response
