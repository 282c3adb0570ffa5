"""
Utility modules for Glance
"""

from glance.utils.error_handlers import ErrorHandler, setup_error_handlers
from glance.utils.sanitize import sanitize_headers, sanitize_string

__all__ = [
    "ErrorHandler",
    "setup_error_handlers",
    "sanitize_headers",
    "sanitize_string",
]
