"""
Security utilities for authentication
Verifies session tokens issued by the external identity provider (Clerk)
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional
import logging

import jwt
from jwt import PyJWKClient

from glance.config import settings
from glance.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

# Clerk signs session tokens with RS256 keys published at its JWKS endpoint
ALLOWED_ALGORITHMS = ["RS256"]


@dataclass(frozen=True)
class CurrentUser:
    """Authenticated caller resolved from a session token"""

    id: str
    session_id: Optional[str] = None


@lru_cache(maxsize=1)
def get_jwks_client() -> PyJWKClient:
    """
    Get singleton JWKS client

    PyJWKClient caches fetched signing keys, so one instance per process
    avoids re-downloading the key set on every request.
    """
    if not settings.CLERK_JWKS_URL:
        raise AuthenticationError("Identity provider is not configured")
    return PyJWKClient(settings.CLERK_JWKS_URL)


def verify_session_token(token: str, jwks_client: Optional[PyJWKClient] = None) -> CurrentUser:
    """
    Verify a session token and resolve the caller

    Args:
        token: Raw JWT from the Authorization header
        jwks_client: Key set client (defaults to the process singleton)

    Returns:
        CurrentUser: caller identified by the "sub" claim

    Raises:
        AuthenticationError: if the token is malformed, expired or badly signed
    """
    client = jwks_client or get_jwks_client()

    try:
        signing_key = client.get_signing_key_from_jwt(token)
        claims = jwt.decode(
            token,
            signing_key.key,
            algorithms=ALLOWED_ALGORITHMS,
            issuer=settings.CLERK_ISSUER or None,
            leeway=settings.AUTH_LEEWAY_SECONDS,
            options={"require": ["exp", "sub"], "verify_aud": False},
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Session token expired")
    except jwt.PyJWTError as e:
        logger.warning(f"Rejected session token: {type(e).__name__}")
        raise AuthenticationError("Invalid session token")

    user_id = claims.get("sub")
    if not user_id:
        raise AuthenticationError("Session token has no subject")

    return CurrentUser(id=user_id, session_id=claims.get("sid"))
