"""
Credential sign-in against Supabase Auth.

authenticate() forwards the login form to the identity provider and turns
exactly one kind of failure, rejected credentials, into a short code the
login form can render. Every other failure propagates unchanged to the
caller's generic error handling.

classify_auth_failure() holds that decision as a pure function so the route
(or anything else) can decide what to do with an unrecognized failure.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from supabase import Client

from invoicing.utils.constants import (
    CREDENTIALS_SCHEME,
    INVALID_CREDENTIALS_CODE,
    INVALID_CREDENTIALS_MARKER,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Recognized:
    """A known auth failure, reduced to its short code."""
    code: str


@dataclass(frozen=True)
class Unrecognized:
    """Any other auth failure, carrying the original exception."""
    error: BaseException


AuthFailure = Union[Recognized, Unrecognized]


def classify_auth_failure(error: BaseException) -> AuthFailure:
    """
    Classify a sign-in failure by its message text.

    Args:
        error: The exception raised by the identity provider

    Returns:
        Recognized(INVALID_CREDENTIALS_CODE) if the message carries the
        invalid-credentials marker, Unrecognized(error) otherwise.
    """
    if INVALID_CREDENTIALS_MARKER in str(error):
        return Recognized(code=INVALID_CREDENTIALS_CODE)
    return Unrecognized(error=error)


def sign_in(
    supabase_client: Client,
    scheme: str,
    fields: Mapping[str, Any],
) -> Any:
    """
    Run a sign-in with the named credential scheme.

    On success Supabase stores the session on `supabase_client`.

    Args:
        supabase_client: Supabase client without a user session
        scheme: Credential scheme name; only "credentials" is supported
        fields: Submitted form fields (email, password, ...)

    Returns:
        The provider's auth response.

    Raises:
        ValueError: If the scheme is not supported
        Exception: Whatever the provider raises on failure
    """
    if scheme != CREDENTIALS_SCHEME:
        raise ValueError(f"Unsupported sign-in scheme: {scheme}")

    return supabase_client.auth.sign_in_with_password(dict(fields))


async def authenticate(
    supabase_client: Client,
    prev_state: Optional[str],
    form_data: Mapping[str, Any],
) -> Optional[str]:
    """
    Sign in with the submitted credentials.

    Args:
        supabase_client: Supabase client without a user session
        prev_state: Code returned by the previous attempt (ignored)
        form_data: Submitted login form fields

    Returns:
        None on success, INVALID_CREDENTIALS_CODE when the provider rejects
        the credentials.

    Raises:
        Exception: Any unrecognized provider failure, unchanged.
    """
    try:
        sign_in(supabase_client, CREDENTIALS_SCHEME, form_data)
    except Exception as e:
        outcome = classify_auth_failure(e)
        if isinstance(outcome, Recognized):
            logger.info("Sign-in rejected: invalid credentials")
            return outcome.code
        logger.error(f"Sign-in failed: {type(e).__name__}")
        raise

    logger.info("Sign-in succeeded")
    return None
