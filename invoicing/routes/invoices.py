"""
Invoice dashboard endpoints.

Form posts from the dashboard land here:
- POST /dashboard/invoices/create       - create an invoice
- POST /dashboard/invoices/{id}/edit    - update an invoice
- POST /dashboard/invoices/{id}/delete  - delete an invoice
- GET  /dashboard/invoices              - list view (cached)
- GET  /dashboard/invoices/{id}         - single invoice (edit form)
- POST /api/invoices, PUT /api/invoices/{id} - JSON variants of create/update

The services return tagged outcomes. This module is the only place that
acts on them: it revalidates cached views, issues redirects, and turns
failures into the {errors, message} payload the form renders.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response
from postgrest.exceptions import APIError

from invoicing.auth.dependencies import AuthenticatedUser, get_authenticated_user
from invoicing.config import settings
from invoicing.db.client import get_supabase_client
from invoicing.schemas.invoices import (
    InvoiceActionError,
    InvoiceActionNotFound,
    InvoiceActionResult,
    InvoiceActionSuccess,
    InvoiceDeleteResponse,
    InvoiceFormState,
    InvoiceListResponse,
    InvoiceResponse,
)
from invoicing.services import view_cache
from invoicing.services.invoice_service import (
    create_invoice,
    create_invoice_with_state,
    delete_invoice,
    get_invoice_by_id,
    get_invoices,
    update_invoice,
    update_invoice_with_state,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix=settings.INVOICES_PATH, tags=["invoices"])

# JSON clients: no inline form errors to render, so these use the raising
# actions and let the app-level InvoiceValidationError handler answer 422.
api_router = APIRouter(prefix="/api/invoices", tags=["invoices-api"])

_FAILURE_STATUS = {
    InvoiceFormState: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvoiceActionNotFound: status.HTTP_404_NOT_FOUND,
    InvoiceActionError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def apply_outcome(outcome: InvoiceActionResult, follow_redirect: bool = True) -> Response:
    """
    Perform the side effects an action outcome asks for.

    Success: revalidate the listed view paths, then redirect (303) when the
    outcome names a target and follow_redirect is set. Failures are rendered
    as JSON with the matching status code. No view is revalidated on failure.
    """
    if isinstance(outcome, InvoiceActionSuccess):
        for path in outcome.revalidate:
            view_cache.revalidate_path(path)
        if outcome.redirect_to and follow_redirect:
            return RedirectResponse(
                url=outcome.redirect_to,
                status_code=status.HTTP_303_SEE_OTHER
            )
        return JSONResponse(status_code=status.HTTP_200_OK, content=outcome.model_dump())

    return JSONResponse(
        status_code=_FAILURE_STATUS[type(outcome)],
        content=outcome.model_dump()
    )


@router.post(
    "/create",
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Create an invoice",
    description="""
    Create an invoice from the dashboard form.

    Form fields: customerId, amount (major units, e.g. "49.99"), status
    (pending | paid).

    - 303 to the invoice list on success
    - 422 with per-field errors when validation fails (nothing is written)
    - 500 with a fixed message when the database write fails
    """
)
async def create_invoice_route(
    request: Request,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> Response:
    form_data = await request.form()

    logger.info(f"Create invoice requested by user_id={auth_user.user_id}")

    supabase_client = get_supabase_client(auth_user.access_token)
    outcome = await create_invoice_with_state(supabase_client, None, form_data)

    return apply_outcome(outcome)


@router.post(
    "/{invoice_id}/edit",
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Update an invoice",
    description="""
    Update customer, amount and status of an invoice.

    id and date are never changed, even if the form carries them.

    - 303 to the invoice list on success
    - 422 with per-field errors when validation fails
    - 404 when no invoice has this id
    - 500 with a fixed message when the database write fails
    """
)
async def update_invoice_route(
    invoice_id: str,
    request: Request,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> Response:
    form_data = await request.form()

    logger.info(f"Update of invoice {invoice_id} requested by user_id={auth_user.user_id}")

    supabase_client = get_supabase_client(auth_user.access_token)
    outcome = await update_invoice_with_state(supabase_client, invoice_id, None, form_data)

    return apply_outcome(outcome)


@router.post(
    "/{invoice_id}/delete",
    response_model=InvoiceDeleteResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete an invoice",
    description="""
    Delete an invoice. Triggered from the list view, so there is no
    redirect; the list view is revalidated instead.

    Deleting an id that does not exist also returns 200.
    """
)
async def delete_invoice_route(
    invoice_id: str,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> Response:
    logger.info(f"Delete of invoice {invoice_id} requested by user_id={auth_user.user_id}")

    supabase_client = get_supabase_client(auth_user.access_token)
    outcome = await delete_invoice(supabase_client, invoice_id)

    if isinstance(outcome, InvoiceActionSuccess):
        for path in outcome.revalidate:
            view_cache.revalidate_path(path)
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=InvoiceDeleteResponse(
                invoice_id=invoice_id,
                message="Invoice deleted successfully"
            ).model_dump()
        )

    return apply_outcome(outcome)


@router.get(
    "",
    response_model=InvoiceListResponse,
    status_code=status.HTTP_200_OK,
    summary="List invoices",
    description="""
    The invoice list view. Served from the view cache until a create,
    update or delete revalidates it.
    """
)
async def list_invoices(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> InvoiceListResponse:
    supabase_client = get_supabase_client(auth_user.access_token)

    async def load() -> InvoiceListResponse:
        invoices = await get_invoices(supabase_client)
        return InvoiceListResponse(
            invoices=[InvoiceResponse.model_validate(inv) for inv in invoices],
            count=len(invoices)
        )

    try:
        return await view_cache.get_or_load(
            settings.INVOICES_PATH, auth_user.user_id, load
        )
    except Exception as e:
        logger.error(f"Failed to fetch invoices: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "fetch_error",
                "details": "Failed to retrieve invoices from database"
            }
        )


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    status_code=status.HTTP_200_OK,
    summary="Get invoice details",
)
async def get_invoice(
    invoice_id: str,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> InvoiceResponse:
    """Fetch one invoice for the edit form. 404 if missing or not visible."""
    supabase_client = get_supabase_client(auth_user.access_token)

    try:
        invoice = await get_invoice_by_id(supabase_client, invoice_id)
    except APIError as e:
        # invalid_text_representation: the id is not a uuid
        if e.code != "22P02":
            logger.error(f"Database error fetching invoice {invoice_id}: {e}", exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail={
                    "error": "fetch_error",
                    "details": "Failed to retrieve invoice from database"
                }
            )
        invoice = None
    except Exception as e:
        logger.error(f"Failed to fetch invoice {invoice_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "fetch_error",
                "details": "Failed to retrieve invoice from database"
            }
        )

    if not invoice:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": "not_found",
                "details": f"Invoice {invoice_id} not found or not accessible"
            }
        )

    return InvoiceResponse.model_validate(invoice)


async def _json_body(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "invalid_request", "details": "Body must be a JSON object"}
        )
    return body


@api_router.post(
    "",
    status_code=status.HTTP_200_OK,
    summary="Create an invoice (JSON)",
    description="""
    Same action as the dashboard form, for JSON clients.

    Body: {"customerId": ..., "amount": "49.99", "status": "pending"}.
    Returns the action outcome instead of redirecting.
    """
)
async def api_create_invoice(
    request: Request,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> Response:
    body = await _json_body(request)
    supabase_client = get_supabase_client(auth_user.access_token)
    outcome = await create_invoice(supabase_client, body)
    return apply_outcome(outcome, follow_redirect=False)


@api_router.put(
    "/{invoice_id}",
    status_code=status.HTTP_200_OK,
    summary="Update an invoice (JSON)",
)
async def api_update_invoice(
    invoice_id: str,
    request: Request,
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> Response:
    body = await _json_body(request)
    supabase_client = get_supabase_client(auth_user.access_token)
    outcome = await update_invoice(supabase_client, invoice_id, body)
    return apply_outcome(outcome, follow_redirect=False)
