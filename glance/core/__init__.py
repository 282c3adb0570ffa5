"""
Core Utilities

Modules:
    - security: identity-provider token verification
    - exceptions: error taxonomy mapped to HTTP responses
"""

from glance.core import security, exceptions

__all__ = ["security", "exceptions"]
