"""
FastAPI dependency functions for authentication.

The dashboard's invoice routes are driven by HTML form posts, so the access
token is read from the Authorization header first and from the
`access_token` cookie (set by POST /auth/login) second.

Tokens are Supabase JWTs signed with ES256 and verified against the
project's JWKS.
"""

import logging
from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Cookie, Header, HTTPException, status
from jwt import PyJWKClient, decode
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError, PyJWKClientError

from invoicing.config import settings

logger = logging.getLogger(__name__)

_jwks_client: PyJWKClient | None = None


@dataclass
class AuthenticatedUser:
    """
    Represents an authenticated user with their token.

    Attributes:
        user_id: The user's UUID from the JWT token's 'sub' claim
        access_token: The full JWT access token (for creating authenticated Supabase clients)
    """
    user_id: str
    access_token: str


def get_jwks_client() -> PyJWKClient:
    """
    Get or create the JWKS client instance.

    Raises:
        ValueError: If SUPABASE_URL is not configured
    """
    global _jwks_client

    if _jwks_client is None:
        jwks_url = settings.SUPABASE_JWKS_URL
        if not jwks_url:
            raise ValueError(
                "SUPABASE_URL is not configured. "
                "Cannot construct JWKS URL for JWT verification."
            )

        logger.info(f"Initializing JWKS client with URL: {jwks_url}")
        _jwks_client = PyJWKClient(
            jwks_url,
            cache_keys=True,
            max_cached_keys=16,
        )

    return _jwks_client


def _unauthorized(error: str, details: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "details": details}
    )


def _extract_token(authorization: Optional[str], access_token: Optional[str]) -> str:
    if authorization:
        parts = authorization.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            logger.warning("Invalid Authorization header format")
            raise _unauthorized("unauthorized", "Invalid Authorization header format")
        return parts[1]

    if access_token:
        # Cookie is stored as "Bearer <token>"
        return access_token.removeprefix("Bearer ").strip()

    logger.warning("Missing Authorization header and access_token cookie")
    raise _unauthorized("unauthorized", "Missing Authorization header")


def _verify(token: str) -> str:
    """Verify the JWT and return its 'sub' claim."""
    try:
        signing_key = get_jwks_client().get_signing_key_from_jwt(token)

        # Supabase issuer includes the /auth/v1 path
        issuer = f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1"

        payload = decode(
            token,
            signing_key.key,
            algorithms=["ES256"],
            audience="authenticated",
            issuer=issuer,
            options={
                "verify_signature": True,
                "verify_exp": True,
                "verify_aud": True,
                "verify_iss": True,
            }
        )

    except ExpiredSignatureError:
        logger.warning("Token has expired")
        raise _unauthorized("token_expired", "Authentication token has expired")

    except PyJWKClientError as e:
        logger.error(f"JWKS client error: {str(e)}")
        raise _unauthorized("jwks_error", "Unable to verify token signature")

    except InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        raise _unauthorized("invalid_token", "Invalid authentication token")

    except Exception as e:
        logger.error(f"Unexpected error during token verification: {str(e)}")
        raise _unauthorized("unauthorized", "Token verification failed")

    user_id = payload.get("sub")
    if not user_id:
        logger.error("Token payload missing 'sub' claim")
        raise _unauthorized("unauthorized", "Invalid token: missing user ID")

    logger.info(f"Token verified successfully for user_id={user_id}")
    return str(user_id)


async def get_authenticated_user(
    authorization: Annotated[str | None, Header()] = None,
    access_token: Annotated[str | None, Cookie()] = None,
) -> AuthenticatedUser:
    """
    Verify the request's token and return the user with that token.

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired

    Usage:
        @router.post("/dashboard/invoices/create")
        async def create(
            auth_user: AuthenticatedUser = Depends(get_authenticated_user)
        ):
            supabase_client = get_supabase_client(auth_user.access_token)
    """
    token = _extract_token(authorization, access_token)
    user_id = _verify(token)
    return AuthenticatedUser(user_id=user_id, access_token=token)
