from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.contrib.auth import get_user_model

User = get_user_model()


@admin.register(User)
class CustomUserAdmin(UserAdmin):
    model = User
    list_display = ['username', 'email', 'phone', 'role', 'status', 'last_activity_at']
    list_filter = ['role', 'status', 'is_staff']
    search_fields = ['username', 'email', 'phone', 'christian_name', 'family_name']
    readonly_fields = ['last_login', 'last_login_at', 'last_activity_at', 'date_joined']
    fieldsets = (
        (None, {'fields': ('username', 'password')}),
        ('Personal info', {'fields': ('christian_name', 'family_name', 'email', 'phone')}),
        ('Cooperative', {'fields': ('role', 'status')}),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        ('Important dates', {'fields': ('last_login', 'last_login_at', 'last_activity_at', 'date_joined')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('username', 'email', 'phone', 'role', 'password1', 'password2'),
        }),
    )
