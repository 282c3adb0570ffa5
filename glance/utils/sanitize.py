"""
Security utility for sanitizing sensitive data in logs and errors
Keeps session tokens and API keys out of log output
"""

from typing import Dict, Any
import re

# Headers that contain sensitive information
SENSITIVE_HEADERS = {
    "authorization",
    "cookie",
    "x-api-key",
    "x-clerk-auth-token",
}

# Patterns to detect and redact sensitive data
SENSITIVE_PATTERNS = [
    (re.compile(r'(sk-[a-zA-Z0-9_\-]{20,})'), 'sk-***REDACTED***'),  # OpenAI keys
    (re.compile(r'(sk_(?:test|live)_[a-zA-Z0-9]{16,})'), 'sk_***REDACTED***'),  # Clerk secret keys
    (re.compile(r'(Bearer\s+[a-zA-Z0-9_\-\.]+)'), 'Bearer ***REDACTED***'),  # Bearer tokens
    (re.compile(r'(eyJ[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+)'), '***JWT REDACTED***'),  # Bare JWTs
]


def sanitize_headers(headers: Dict[str, Any]) -> Dict[str, Any]:
    """
    Remove sensitive headers from dict

    Args:
        headers: Dictionary of headers

    Returns:
        Sanitized headers with sensitive values redacted
    """
    if not isinstance(headers, dict):
        return headers

    sanitized = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS:
            sanitized[key] = "***REDACTED***"
        else:
            sanitized[key] = value

    return sanitized


def sanitize_string(text: str) -> str:
    """
    Remove sensitive patterns from string

    Args:
        text: String that may contain sensitive data

    Returns:
        Sanitized string with patterns redacted
    """
    if not isinstance(text, str):
        return text

    sanitized = text
    for pattern, replacement in SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)

    return sanitized


def get_safe_user_display(user_id: str) -> str:
    """Shorten a user id for logs (e.g. "user_2abcDEF...")"""
    if not user_id or not isinstance(user_id, str):
        return "***INVALID***"

    if len(user_id) <= 12:
        return user_id

    return f"{user_id[:12]}..."
