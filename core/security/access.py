# core/security/access.py
from functools import wraps

from core.security.outcomes import Forbidden, Ok, Outcome, Unauthenticated, render_outcome
from core.utils.request_context import get_acting_user


def check_role(request, roles=()):
    """
    Return the denial outcome for this request, or None when the user may
    proceed. An empty ``roles`` admits any authenticated user.
    """
    user = get_acting_user(request)
    if user is None:
        return Unauthenticated()
    if roles and user.role not in roles:
        return Forbidden(Forbidden.ACCESS_DENIED)
    return None


def role_required(*roles):
    """
    Guard a view by role. The view may return a plain response or any
    Outcome; both go through render_outcome.
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped_view(request, *args, **kwargs):
            outcome = check_role(request, roles)
            if outcome is None:
                result = view_func(request, *args, **kwargs)
                outcome = result if isinstance(result, Outcome) else Ok(result)
            return render_outcome(request, outcome)
        return _wrapped_view
    return decorator
