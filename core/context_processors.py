# core/context_processors.py
from django.conf import settings
from django.urls import reverse


def session_settings(request):
    """Idle monitor configuration for authenticated pages."""
    if not request.user.is_authenticated:
        return {'idle_monitor_config': None}

    return {
        'idle_monitor_config': {
            'timeoutMinutes': settings.SESSION_TIMEOUT_MINUTES,
            'warningMinutes': settings.IDLE_WARNING_MINUTES,
            'checkIntervalMs': settings.IDLE_CHECK_INTERVAL_MS,
            'logoutDelayMs': settings.IDLE_LOGOUT_DELAY_SECONDS * 1000,
            'logoutUrl': reverse('logout'),
            'redirectUrl': reverse('home'),
        }
    }
