"""
Request protection
"""

from glance.middleware.rate_limiter import RateLimiter, setup_rate_limiting

__all__ = ["RateLimiter", "setup_rate_limiting"]
