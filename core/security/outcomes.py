# core/security/outcomes.py
"""
Request outcomes for protected views.

Guards and views hand back one of these instead of raising, and
``render_outcome`` turns it into the HTTP response for either JSON or
browser callers.
"""
import logging

from django.contrib import messages
from django.http import JsonResponse
from django.shortcuts import redirect, render

from core.services import audit
from core.utils.request_context import wants_json

logger = logging.getLogger(__name__)

UNAUTHENTICATED_MESSAGE = 'Unauthenticated. Please login to continue.'
ACCESS_DENIED_MESSAGE = 'Access denied. You do not have permission to access this resource.'
FORBIDDEN_MESSAGE = 'Forbidden. You do not have permission to access this resource.'
SESSION_EXPIRED_MESSAGE = 'Session expired. Please login again.'
SESSION_EXPIRED_FLASH = 'Session expired due to inactivity. Please login again.'


class Outcome:
    kind = None

    def __repr__(self):
        return f"<{type(self).__name__}>"


class Ok(Outcome):
    kind = 'ok'

    def __init__(self, response):
        self.response = response


class Unauthenticated(Outcome):
    kind = 'unauthenticated'


class Forbidden(Outcome):
    kind = 'forbidden'

    ACCESS_DENIED = 'ACCESS_DENIED'
    FORBIDDEN = 'FORBIDDEN'

    def __init__(self, code=ACCESS_DENIED):
        if code not in (self.ACCESS_DENIED, self.FORBIDDEN):
            raise ValueError(f"Unknown forbidden code: {code}")
        self.code = code

    @property
    def message(self):
        return ACCESS_DENIED_MESSAGE if self.code == self.ACCESS_DENIED else FORBIDDEN_MESSAGE


class Expired(Outcome):
    kind = 'expired'


def render_outcome(request, outcome):
    if outcome.kind == Ok.kind:
        return outcome.response

    if outcome.kind == Unauthenticated.kind:
        logger.warning(f"Unauthenticated access to {request.path}")
        audit.log_unauthorized_access(request)
        return _failure(request, UNAUTHENTICATED_MESSAGE, 'UNAUTHENTICATED', 401)

    if outcome.kind == Forbidden.kind:
        logger.warning(f"Forbidden access to {request.path} by user {getattr(request.user, 'pk', None)}")
        audit.log_forbidden_access(request, outcome.code)
        return _failure(request, outcome.message, outcome.code, 403)

    if outcome.kind == Expired.kind:
        if wants_json(request):
            return _json_failure(SESSION_EXPIRED_MESSAGE, 'SESSION_EXPIRED', 401)
        messages.warning(request, SESSION_EXPIRED_FLASH)
        return redirect('login')

    raise ValueError(f"Unhandled request outcome: {outcome!r}")


def _json_failure(message, code, status):
    return JsonResponse({'success': False, 'message': message, 'code': code}, status=status)


def _failure(request, message, code, status):
    if wants_json(request):
        return _json_failure(message, code, status)
    return render(request, 'errors/unauthorized.html', {'message': message}, status=status)
