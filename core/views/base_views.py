# core/views/base_views.py
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.utils import timezone

from accounts.models import CustomUser
from core.models import AuditLog, LoginSession
from core.security.access import role_required
from core.security.outcomes import Forbidden, render_outcome
from core.utils.request_context import wants_json


def home(request):
    if request.user.is_authenticated:
        return redirect(request.user.get_dashboard_url_name())
    return redirect('login')


@role_required()
def dashboard(request):
    user = request.user
    if wants_json(request):
        return JsonResponse({
            'success': True,
            'data': {'name': user.get_full_name(), 'role': user.role},
        })
    return render(request, 'core/dashboard.html', {'profile_user': user})


@role_required(CustomUser.ROLE_ADMIN)
def admin_dashboard(request):
    today = timezone.localdate()
    stats = {
        'active_sessions': LoginSession.objects.active().count(),
        'logins_today': LoginSession.objects.filter(login_at__date=today).count(),
        'audit_events_today': AuditLog.objects.filter(created_at__date=today).count(),
        'timeouts_today': AuditLog.objects.filter(
            action=AuditLog.SESSION_TIMEOUT, created_at__date=today
        ).count(),
    }

    if wants_json(request):
        return JsonResponse({'success': True, 'data': stats})

    recent_logs = AuditLog.objects.select_related('user')[:10]
    return render(request, 'core/admin_dashboard.html', {'stats': stats, 'recent_logs': recent_logs})


def permission_denied(request, exception=None):
    """handler403: PermissionDenied raised anywhere."""
    return render_outcome(request, Forbidden(Forbidden.FORBIDDEN))
