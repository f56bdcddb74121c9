# core/exceptions.py
"""
Custom exception classes for Koabiga.

These never reach the client: the audit and session-store services raise
them internally and the callers log and swallow them.
"""

import logging

logger = logging.getLogger(__name__)


class KoabigaException(Exception):
    """Base exception for the cooperative management system"""

    def __init__(self, message=None, details=None, user=None):
        self.message = message or "An error occurred in the cooperative management system"
        self.details = details
        self.user = user
        super().__init__(self.message)


class AuditWriteError(KoabigaException):
    """Raised when an audit event cannot be persisted"""

    def __init__(self, message="Audit event could not be written", action=None, **kwargs):
        self.action = action
        super().__init__(message, **kwargs)


class SessionStoreError(KoabigaException):
    """Raised when a login session record cannot be written"""

    def __init__(self, message="Login session could not be written", operation=None, **kwargs):
        self.operation = operation
        super().__init__(message, **kwargs)


class AppendOnlyViolation(KoabigaException):
    """Raised on attempts to change or delete an audit event"""

    def __init__(self, message="Audit events are append-only", **kwargs):
        super().__init__(message, **kwargs)
