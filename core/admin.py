from django.contrib import admin

from .models import AuditLog, LoginSession


@admin.register(LoginSession)
class LoginSessionAdmin(admin.ModelAdmin):
    list_display = ('user', 'ip_address', 'is_active', 'forced_logout', 'login_at', 'last_activity_at', 'logout_at')
    list_filter = ('is_active', 'forced_logout', 'login_at')
    search_fields = ('user__email', 'user__phone', 'user__christian_name', 'user__family_name', 'ip_address')
    readonly_fields = ('user', 'ip_address', 'user_agent', 'login_at', 'last_activity_at', 'logout_at', 'forced_logout')
    exclude = ('session_key',)
    date_hierarchy = 'login_at'

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ('user', 'action', 'level', 'ip_address', 'created_at')
    list_filter = ('action', 'level', 'created_at')
    search_fields = ('user__email', 'user__phone', 'description', 'ip_address')
    readonly_fields = ('user', 'action', 'level', 'description', 'url', 'ip_address', 'user_agent', 'details', 'created_at')
    date_hierarchy = 'created_at'

    # Append-only
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
