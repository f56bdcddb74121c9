# core/filters.py
from django_filters import rest_framework as filters

from .models import AuditLog, LoginSession


class LoginSessionFilter(filters.FilterSet):
    user_id = filters.NumberFilter(field_name='user_id')
    is_active = filters.BooleanFilter()
    start_date = filters.DateFilter(field_name='login_at', lookup_expr='date__gte')
    end_date = filters.DateFilter(field_name='login_at', lookup_expr='date__lte')

    class Meta:
        model = LoginSession
        fields = ['user_id', 'is_active', 'start_date', 'end_date']


class AuditLogFilter(filters.FilterSet):
    user_id = filters.NumberFilter(field_name='user_id')
    action = filters.ChoiceFilter(choices=AuditLog.ACTION_CHOICES)
    level = filters.ChoiceFilter(choices=AuditLog.LEVEL_CHOICES)
    start_date = filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    end_date = filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = AuditLog
        fields = ['user_id', 'action', 'level', 'start_date', 'end_date']
