from .error_logging import ErrorLoggingMiddleware
from .session_timeout import SessionTimeoutMiddleware

__all__ = [
    'ErrorLoggingMiddleware',
    'SessionTimeoutMiddleware',
]
