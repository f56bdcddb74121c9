# core/serializers.py
from rest_framework import serializers

from .models import AuditLog, LoginSession


class UserSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField(source='get_full_name')
    email = serializers.EmailField()
    phone = serializers.CharField(allow_null=True)
    role = serializers.CharField()


class LoginSessionSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)
    duration_minutes = serializers.SerializerMethodField()

    class Meta:
        model = LoginSession
        # session_key is deliberately absent
        fields = [
            'id', 'user', 'ip_address', 'user_agent', 'is_active', 'forced_logout',
            'login_at', 'last_activity_at', 'logout_at', 'duration_minutes',
        ]
        read_only_fields = fields

    def get_duration_minutes(self, obj):
        duration = obj.duration
        if duration is None:
            return None
        return round(duration.total_seconds() / 60, 2)


class AuditLogSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True, allow_null=True)

    class Meta:
        model = AuditLog
        fields = [
            'id', 'user', 'action', 'level', 'description', 'url',
            'ip_address', 'user_agent', 'details', 'created_at',
        ]
        read_only_fields = fields
