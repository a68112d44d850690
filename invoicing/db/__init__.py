"""
Database access layer for the invoicing actions backend.

All invoice reads and writes go through a per-request Supabase client:
- Statements are built with the PostgREST query builder, so every value is
  bound as a parameter (never concatenated into SQL)
- Row Level Security scopes rows to the authenticated user
"""

from .client import get_auth_client, get_supabase_client

__all__ = ["get_auth_client", "get_supabase_client"]
