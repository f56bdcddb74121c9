# core/middleware/error_logging.py
"""
Error Logging Middleware
Records error responses and slow database queries as audit events.
"""
import logging
import time

from django.conf import settings
from django.db import connection
from django.http import HttpResponseServerError, JsonResponse

from core.services import audit
from core.utils.request_context import get_acting_user, wants_json

logger = logging.getLogger(__name__)


class QueryTimer:
    """connection.execute_wrapper hook collecting (sql, duration_ms) pairs."""

    def __init__(self):
        self.queries = []

    def __call__(self, execute, sql, params, many, context):
        start = time.monotonic()
        try:
            return execute(sql, params, many, context)
        finally:
            self.queries.append((sql, (time.monotonic() - start) * 1000))


class ErrorLoggingMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        timer = QueryTimer()
        with connection.execute_wrapper(timer):
            response = self.get_response(request)

        try:
            self._report(request, response, timer.queries)
        except Exception as e:
            logger.error(f"Error reporting failed for {request.method} {request.path}: {e}")

        return response

    def process_exception(self, request, exception):
        """Unhandled view errors become a bare 500, never a stack trace."""
        logger.error(
            f"Exception in {request.method} {request.path}: {exception}",
            exc_info=True
        )
        if wants_json(request):
            return JsonResponse(
                {'success': False, 'message': 'Internal server error', 'code': 'SERVER_ERROR'},
                status=500,
            )
        return HttpResponseServerError('Internal Server Error')

    def _report(self, request, response, queries):
        user = get_acting_user(request)
        threshold = getattr(settings, 'SLOW_QUERY_THRESHOLD_MS', 1000)

        for sql, duration_ms in queries:
            if duration_ms > threshold:
                logger.warning(f"Slow query ({duration_ms:.0f}ms) on {request.path}: {sql[:200]}")
                audit.log_slow_query(request, sql, duration_ms, user=user)

        if response.status_code >= 400:
            audit.log_http_error(request, response.status_code, user=user)
