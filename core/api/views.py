# core/api/views.py
"""
Admin monitoring endpoints for login sessions and audit events.
"""
import logging
from importlib import import_module

from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.filters import AuditLogFilter, LoginSessionFilter
from core.models import AuditLog, LoginSession
from core.serializers import AuditLogSerializer, LoginSessionSerializer
from core.services import audit, monitoring

from .permissions import IsAdminRole

logger = logging.getLogger(__name__)

User = get_user_model()


def _not_found(message):
    return Response({'success': False, 'message': message}, status=404)


class AdminMonitoringViewSet(viewsets.ReadOnlyModelViewSet):
    permission_classes = [IsAuthenticated, IsAdminRole]

    def retrieve(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_object())
        return Response({'success': True, 'data': serializer.data})

    def get_target_user(self, user_id):
        return User.objects.filter(pk=user_id).first()


class LoginSessionViewSet(AdminMonitoringViewSet):
    """
    Login history. Session tokens never leave the server; records are
    addressed by id.
    """
    queryset = LoginSession.objects.select_related('user')
    serializer_class = LoginSessionSerializer
    filterset_class = LoginSessionFilter

    @action(detail=False, methods=['get'])
    def statistics(self, request):
        return Response({'success': True, 'data': monitoring.session_statistics()})

    @action(detail=False, methods=['get'], url_path=r'users/(?P<user_id>\d+)')
    def user_summary(self, request, user_id=None):
        user = self.get_target_user(user_id)
        if user is None:
            return _not_found('User not found')

        summary = monitoring.user_session_summary(user)
        summary['recent_sessions'] = self.get_serializer(summary['recent_sessions'], many=True).data
        return Response({'success': True, 'data': summary})

    @action(detail=True, methods=['post'], url_path='force-logout')
    def force_logout(self, request, pk=None):
        login_session = LoginSession.objects.select_related('user').filter(pk=pk).first()
        if login_session is None:
            return _not_found('Session not found')

        if not login_session.deactivate(forced=True):
            return Response({
                'success': True,
                'message': 'Session is already inactive',
                'data': self.get_serializer(login_session).data,
            })

        session_engine = import_module(settings.SESSION_ENGINE)
        session_engine.SessionStore(session_key=login_session.session_key).delete()

        target = login_session.user
        audit.log_logout(
            request.user,
            request=request._request,
            description=f"Forced logout of user {target} by {request.user}",
            details={
                'forced': True,
                'target_user_id': target.pk,
                'login_session_id': login_session.pk,
            },
        )
        logger.warning(f"Admin {request.user.pk} forced logout of session {login_session.pk} (user {target.pk})")

        return Response({
            'success': True,
            'message': 'User has been logged out successfully',
            'data': self.get_serializer(login_session).data,
        })


class ActivityLogViewSet(AdminMonitoringViewSet):
    queryset = AuditLog.objects.select_related('user')
    serializer_class = AuditLogSerializer
    filterset_class = AuditLogFilter

    @action(detail=False, methods=['get'])
    def statistics(self, request):
        return Response({'success': True, 'data': monitoring.activity_statistics()})

    @action(detail=False, methods=['get'], url_path=r'users/(?P<user_id>\d+)')
    def user_summary(self, request, user_id=None):
        user = self.get_target_user(user_id)
        if user is None:
            return _not_found('User not found')

        summary = monitoring.user_activity_summary(user)
        summary['recent_activities'] = self.get_serializer(summary['recent_activities'], many=True).data
        return Response({'success': True, 'data': summary})

    @action(detail=False, methods=['get'])
    def errors(self, request):
        """HTTP errors and slow queries only; accepts the same filters."""
        queryset = self.filter_queryset(monitoring.error_logs().select_related('user'))
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(self.get_serializer(page, many=True).data)

    @action(detail=False, methods=['get'], url_path='errors/statistics')
    def error_statistics(self, request):
        return Response({'success': True, 'data': monitoring.error_statistics()})
