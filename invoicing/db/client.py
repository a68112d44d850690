"""
Supabase client factory.

Two kinds of clients are handed out:
1. get_supabase_client(access_token) - per-request client carrying the
   user's JWT, so every invoices query runs under Row Level Security
2. get_auth_client() - unauthenticated client used only to run the
   credential sign-in against Supabase Auth

Clients MUST be created per request. They hold session state.
"""

import logging

from invoicing.config import settings
from supabase import Client, create_client

logger = logging.getLogger(__name__)


def get_supabase_client(access_token: str) -> Client:
    """
    Create an authenticated Supabase client for a specific user.

    Args:
        access_token: The user's JWT access token from Supabase Auth.
                     This is the token verified in invoicing/auth/dependencies.py.

    Returns:
        An authenticated Supabase client that enforces RLS.

    Example:
        >>> client = get_supabase_client(token)
        >>> result = client.table("invoices").select("*").execute()
    """
    client: Client = create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_PUBLISHABLE_KEY
    )

    # The token's 'sub' claim is what RLS policies see as auth.uid()
    client.auth.set_session(access_token, access_token)

    logger.debug(
        "Created authenticated Supabase client with user token "
        "(RLS enforced)"
    )

    return client


def get_auth_client() -> Client:
    """
    Create a Supabase client with no user session.

    Used by the login route: sign_in_with_password() stores the resulting
    session on this client, which the route then reads back.

    Returns:
        A Supabase client authenticated only with the publishable key.
    """
    client: Client = create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_PUBLISHABLE_KEY
    )

    logger.debug("Created unauthenticated Supabase client for sign-in")

    return client
