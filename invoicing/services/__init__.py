"""
Service layer for the invoicing actions backend.

Services hold the actions themselves:
- Validate untrusted input
- Run one statement against Supabase (RLS enforced by the client)
- Return a tagged outcome; routes perform redirects and view invalidation
"""

from .auth_service import authenticate, classify_auth_failure, sign_in
from .invoice_service import (
    create_invoice,
    create_invoice_with_state,
    delete_invoice,
    get_invoice_by_id,
    get_invoices,
    update_invoice,
    update_invoice_with_state,
)

__all__ = [
    "authenticate",
    "classify_auth_failure",
    "sign_in",
    "create_invoice",
    "create_invoice_with_state",
    "update_invoice",
    "update_invoice_with_state",
    "delete_invoice",
    "get_invoices",
    "get_invoice_by_id",
]
