# core/services/monitoring.py
"""
Aggregates behind the admin monitoring API.
"""
from datetime import timedelta

from django.db.models import Count
from django.utils import timezone

from core.models import AuditLog, LoginSession


def period_starts(now=None):
    """Local midnight today, Monday of this week, first of this month."""
    now = timezone.localtime(now or timezone.now())
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return {
        'today': today,
        'week': today - timedelta(days=today.weekday()),
        'month': today.replace(day=1),
    }


def average_duration_minutes(sessions):
    """Mean length of the closed sessions in ``sessions``, 0 when none closed."""
    spans = sessions.filter(logout_at__isnull=False).values_list('login_at', 'logout_at')
    total = timedelta()
    count = 0
    for login_at, logout_at in spans:
        total += logout_at - login_at
        count += 1
    if not count:
        return 0
    return round(total.total_seconds() / count / 60, 2)


def _display_name(row, prefix='user__'):
    name = ' '.join(
        part for part in (row.get(f'{prefix}christian_name'), row.get(f'{prefix}family_name')) if part
    )
    return name or row.get(f'{prefix}email') or row.get(f'{prefix}phone') or 'Unknown User'


def _top_users(queryset, count_key):
    rows = (
        queryset.exclude(user__isnull=True)
        .values('user_id', 'user__christian_name', 'user__family_name', 'user__email', 'user__phone')
        .annotate(total=Count('id'))
        .order_by('-total', 'user_id')[:5]
    )
    return [
        {'user_id': row['user_id'], 'name': _display_name(row), count_key: row['total']}
        for row in rows
    ]


def session_statistics(now=None):
    starts = period_starts(now)
    sessions = LoginSession.objects.all()
    return {
        'total_sessions': sessions.count(),
        'active_sessions': sessions.filter(is_active=True).count(),
        'today_sessions': sessions.filter(login_at__gte=starts['today']).count(),
        'this_week_sessions': sessions.filter(login_at__gte=starts['week']).count(),
        'this_month_sessions': sessions.filter(login_at__gte=starts['month']).count(),
        'top_users': _top_users(sessions, 'session_count'),
        'average_duration_minutes': average_duration_minutes(sessions),
    }


def user_session_summary(user, now=None):
    starts = period_starts(now)
    sessions = LoginSession.objects.for_user(user)
    return {
        'total_sessions': sessions.count(),
        'active_sessions': sessions.filter(is_active=True).count(),
        'today_sessions': sessions.filter(login_at__gte=starts['today']).count(),
        'this_week_sessions': sessions.filter(login_at__gte=starts['week']).count(),
        'average_duration_minutes': average_duration_minutes(sessions),
        'recent_sessions': list(sessions.select_related('user')[:10]),
    }


def activity_statistics(now=None):
    starts = period_starts(now)
    logs = AuditLog.objects.all()
    top_actions = (
        logs.values('action')
        .annotate(total=Count('id'))
        .order_by('-total', 'action')[:5]
    )
    return {
        'total_activities': logs.count(),
        'today_activities': logs.filter(created_at__gte=starts['today']).count(),
        'this_week_activities': logs.filter(created_at__gte=starts['week']).count(),
        'this_month_activities': logs.filter(created_at__gte=starts['month']).count(),
        'top_actions': [{'action': row['action'], 'count': row['total']} for row in top_actions],
        'top_users': _top_users(logs, 'count'),
    }


def user_activity_summary(user, now=None):
    starts = period_starts(now)
    logs = AuditLog.objects.filter(user=user)
    by_action = logs.values('action').annotate(total=Count('id')).order_by('action')
    return {
        'total_activities': logs.count(),
        'today_activities': logs.filter(created_at__gte=starts['today']).count(),
        'this_week_activities': logs.filter(created_at__gte=starts['week']).count(),
        'activities_by_action': {row['action']: row['total'] for row in by_action},
        'recent_activities': list(logs.select_related('user')[:10]),
    }


def error_logs():
    return AuditLog.objects.filter(action__in=AuditLog.ERROR_ACTIONS)


def error_statistics(now=None):
    starts = period_starts(now)
    logs = error_logs()
    by_level = logs.values('level').annotate(total=Count('id')).order_by('level')
    by_level = {row['level']: row['total'] for row in by_level}
    return {
        'total_errors': logs.count(),
        'errors_today': logs.filter(created_at__gte=starts['today']).count(),
        'errors_this_week': logs.filter(created_at__gte=starts['week']).count(),
        'errors_this_month': logs.filter(created_at__gte=starts['month']).count(),
        'error_levels': {level: by_level.get(level, 0) for level, _ in AuditLog.LEVEL_CHOICES},
        'errors_by_action': {action: logs.filter(action=action).count() for action in AuditLog.ERROR_ACTIONS},
    }
