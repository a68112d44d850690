"""
Invoice mutation actions.

Every action follows the same straight line:
1. Validate the form (create/update only)
2. Issue ONE statement against the invoices table
3. Return a tagged outcome describing what the caller must do next

Actions never navigate or touch caches themselves. An InvoiceActionSuccess
tells the route which view paths to revalidate and where to redirect.

Store failures are caught here, logged, and replaced by a fixed message per
operation. The underlying error never reaches the caller.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, cast

from supabase import Client

from invoicing.config import settings
from invoicing.schemas.invoices import (
    CreateInvoice,
    InvoiceActionError,
    InvoiceActionNotFound,
    InvoiceActionResult,
    InvoiceActionSuccess,
    InvoiceFields,
    InvoiceFormState,
    UpdateInvoice,
    ValidationMode,
    validate_invoice_form,
)
from invoicing.utils.constants import (
    DB_ERROR_MESSAGES,
    INVOICE_NOT_FOUND_MESSAGE,
    INVOICES_TABLE,
)

logger = logging.getLogger(__name__)


def current_invoice_date() -> str:
    """Today's UTC date as YYYY-MM-DD."""
    return datetime.now(timezone.utc).date().isoformat()


async def _create(
    supabase_client: Client,
    form_data: Mapping[str, Any],
    mode: ValidationMode,
) -> InvoiceActionResult:
    validated = validate_invoice_form(
        form_data, schema=CreateInvoice, mode=mode, action="create"
    )
    if isinstance(validated, InvoiceFormState):
        logger.info(f"Create invoice rejected: fields={list(validated.errors.keys())}")
        return validated

    invoice_data = {
        "customer_id": validated.customer_id,
        "amount": validated.amount_in_cents,
        "status": validated.status,
        "date": current_invoice_date(),
    }

    try:
        supabase_client.table(INVOICES_TABLE).insert(invoice_data).execute()
    except Exception as e:
        logger.error(f"Failed to create invoice: {e}", exc_info=True)
        return InvoiceActionError(message=DB_ERROR_MESSAGES["create"])

    logger.info(
        f"Invoice created: customer_id={validated.customer_id}, "
        f"status={validated.status}"
    )

    return InvoiceActionSuccess(
        redirect_to=settings.INVOICES_PATH,
        revalidate=[settings.INVOICES_PATH],
    )


async def create_invoice(
    supabase_client: Client,
    form_data: Mapping[str, Any],
) -> InvoiceActionResult:
    """
    Create an invoice, raising on invalid input.

    Args:
        supabase_client: Authenticated Supabase client (with user token)
        form_data: Raw form fields: customerId, amount, status

    Returns:
        InvoiceActionSuccess (revalidate + redirect to the invoice list) or
        InvoiceActionError when the insert fails.

    Raises:
        InvoiceValidationError: If any field is invalid. Nothing is written.
    """
    return await _create(supabase_client, form_data, "raise")


async def create_invoice_with_state(
    supabase_client: Client,
    prev_state: Optional[InvoiceFormState],
    form_data: Mapping[str, Any],
) -> InvoiceActionResult:
    """
    Create an invoice, reporting invalid input as form state.

    prev_state is the form state from the previous submission. It is not
    used; every submission is validated from scratch.

    Returns:
        InvoiceFormState with every field error, InvoiceActionError, or
        InvoiceActionSuccess.
    """
    return await _create(supabase_client, form_data, "collect")


async def _update(
    supabase_client: Client,
    invoice_id: str,
    form_data: Mapping[str, Any],
    mode: ValidationMode,
) -> InvoiceActionResult:
    validated = validate_invoice_form(
        form_data, schema=UpdateInvoice, mode=mode, action="update"
    )
    if isinstance(validated, InvoiceFormState):
        logger.info(
            f"Update of invoice {invoice_id} rejected: "
            f"fields={list(validated.errors.keys())}"
        )
        return validated

    update_data = _update_payload(validated)

    try:
        result = (
            supabase_client.table(INVOICES_TABLE)
            .update(update_data)
            .eq("id", invoice_id)
            .execute()
        )
    except Exception as e:
        logger.error(f"Failed to update invoice {invoice_id}: {e}", exc_info=True)
        return InvoiceActionError(message=DB_ERROR_MESSAGES["update"])

    if not result.data:
        logger.warning(f"Update matched no invoice with id={invoice_id}")
        return InvoiceActionNotFound(message=INVOICE_NOT_FOUND_MESSAGE)

    logger.info(f"Invoice {invoice_id} updated: status={validated.status}")

    return InvoiceActionSuccess(
        redirect_to=settings.INVOICES_PATH,
        revalidate=[settings.INVOICES_PATH],
    )


def _update_payload(validated: InvoiceFields) -> Dict[str, Any]:
    # id and date are immutable after creation
    return {
        "customer_id": validated.customer_id,
        "amount": validated.amount_in_cents,
        "status": validated.status,
    }


async def update_invoice(
    supabase_client: Client,
    invoice_id: str,
    form_data: Mapping[str, Any],
) -> InvoiceActionResult:
    """
    Update customer, amount, and status of an invoice, raising on invalid input.

    Args:
        supabase_client: Authenticated Supabase client (with user token)
        invoice_id: UUID of the invoice to update
        form_data: Raw form fields: customerId, amount, status

    Returns:
        InvoiceActionSuccess, InvoiceActionNotFound when no row has this id,
        or InvoiceActionError when the update fails.

    Raises:
        InvoiceValidationError: If any field is invalid. Nothing is written.
    """
    return await _update(supabase_client, invoice_id, form_data, "raise")


async def update_invoice_with_state(
    supabase_client: Client,
    invoice_id: str,
    prev_state: Optional[InvoiceFormState],
    form_data: Mapping[str, Any],
) -> InvoiceActionResult:
    """Update an invoice, reporting invalid input as form state."""
    return await _update(supabase_client, invoice_id, form_data, "collect")


async def delete_invoice(
    supabase_client: Client,
    invoice_id: str,
) -> InvoiceActionResult:
    """
    Delete an invoice.

    Deleting an id that does not exist succeeds like any other delete.
    On success only the list view is revalidated: delete is triggered from
    the list itself, so there is no redirect.

    Returns:
        InvoiceActionSuccess (no redirect) or InvoiceActionError.
    """
    try:
        supabase_client.table(INVOICES_TABLE).delete().eq("id", invoice_id).execute()
    except Exception as e:
        logger.error(f"Failed to delete invoice {invoice_id}: {e}", exc_info=True)
        return InvoiceActionError(message=DB_ERROR_MESSAGES["delete"])

    logger.info(f"Invoice {invoice_id} deleted")

    return InvoiceActionSuccess(
        redirect_to=None,
        revalidate=[settings.INVOICES_PATH],
    )


async def get_invoices(supabase_client: Client) -> List[Dict[str, Any]]:
    """
    Fetch the invoices visible to the authenticated user, newest first.

    Raises:
        Exception: If the database operation fails
    """
    result = (
        supabase_client.table(INVOICES_TABLE)
        .select("id, customer_id, amount, status, date")
        .order("date", desc=True)
        .execute()
    )

    invoices = cast(List[Dict[str, Any]], result.data or [])

    logger.info(f"Fetched {len(invoices)} invoices")

    return invoices


async def get_invoice_by_id(
    supabase_client: Client,
    invoice_id: str,
) -> Optional[Dict[str, Any]]:
    """
    Fetch a single invoice by its ID.

    Returns:
        Invoice record if found and visible to the user, None otherwise
    """
    result = (
        supabase_client.table(INVOICES_TABLE)
        .select("id, customer_id, amount, status, date")
        .eq("id", invoice_id)
        .execute()
    )

    if not result.data:
        logger.warning(f"Invoice {invoice_id} not found or not accessible")
        return None

    return cast(Dict[str, Any], result.data[0])
