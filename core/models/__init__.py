"""
Models package initialization.
"""

from .security import LoginSession
from .audit import AuditLog

__all__ = [
    'LoginSession',
    'AuditLog',
]
