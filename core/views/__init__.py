from .base_views import admin_dashboard, dashboard, home, permission_denied

__all__ = [
    'admin_dashboard',
    'dashboard',
    'home',
    'permission_denied',
]
