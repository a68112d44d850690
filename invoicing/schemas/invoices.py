"""
Pydantic schemas for invoice actions.

Three groups of models live here:
- Input shapes: InvoiceFields and the narrowed CreateInvoice / UpdateInvoice
  shapes checked against untrusted form input
- Outcome shapes: the tagged results every invoice action returns, which the
  route layer turns into redirects, cache invalidation, or error payloads
- Read shapes: InvoiceResponse, the persisted record as the store returns it

validate_invoice_form() is the single entry point for form validation. It
runs in one of two modes:
- "raise": raise InvoiceValidationError on failure
- "collect": return an InvoiceFormState with every field error, never raise
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Literal, Mapping, Optional, Type, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from invoicing.utils.constants import (
    FIELD_ERROR_MESSAGES,
    MAX_AMOUNT_CENTS,
    VALIDATION_SUMMARY_MESSAGE,
)

# Invoice status enum (matches DB CHECK constraint)
InvoiceStatus = Literal["pending", "paid"]

ValidationMode = Literal["raise", "collect"]

# Largest amount, in major units, whose cents fit the amount column
MAX_AMOUNT = Decimal(MAX_AMOUNT_CENTS) / 100

# Form field names read from the submitted form
FORM_FIELDS = ("customerId", "amount", "status")

# Python attribute name -> form field name
_FIELD_ALIASES = {
    "customer_id": "customerId",
    "customerId": "customerId",
    "amount": "amount",
    "status": "status",
}


def _to_cents(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# --- Input models ---

class InvoiceFields(BaseModel):
    """
    Fields a user may set on an invoice.

    amount arrives as a decimal string in major units (e.g. "49.99"). It must
    be worth at least one cent once rounded and fit the integer amount column.
    """
    customer_id: str = Field(
        ...,
        alias="customerId",
        min_length=1,
        description="UUID of the customer this invoice bills"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        le=MAX_AMOUNT,
        allow_inf_nan=False,
        description="Invoice amount in major currency units",
        examples=["49.99"]
    )
    status: InvoiceStatus = Field(..., description="Payment status")

    model_config = {
        "populate_by_name": True,
        "str_strip_whitespace": True,
        "extra": "ignore",
    }

    @field_validator("amount")
    @classmethod
    def amount_has_cents(cls, v: Decimal) -> Decimal:
        if _to_cents(v) < 1:
            raise ValueError("amount rounds to zero cents")
        return v

    @property
    def amount_in_cents(self) -> int:
        """Amount in minor units, rounded half away from zero."""
        return _to_cents(self.amount)


class CreateInvoice(InvoiceFields):
    """Create input: the record without id and date."""


class UpdateInvoice(InvoiceFields):
    """
    Update input: the record without id and date.

    The invoice id comes from the URL, not the payload.
    """


class InvoiceValidationError(ValueError):
    """
    Raised by validate_invoice_form() in "raise" mode.

    Attributes:
        errors: form field name -> list of messages
    """

    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = errors
        fields = ", ".join(errors.keys())
        super().__init__(f"Invalid invoice fields: {fields}")


# --- Outcome models ---

class InvoiceActionSuccess(BaseModel):
    """
    The write went through.

    The caller owns the side effects: mark every path in `revalidate` stale,
    then navigate to `redirect_to` when it is set.
    """
    status: Literal["SUCCESS"] = Field("SUCCESS")
    redirect_to: Optional[str] = Field(
        None,
        description="View path to navigate to, or None to stay on the current view"
    )
    revalidate: List[str] = Field(
        default_factory=list,
        description="Cached view paths that must be invalidated"
    )


class InvoiceFormState(BaseModel):
    """
    Form state returned to the invoice form when validation fails.

    Mirrors what the form renders inline: per-field messages plus one summary.
    """
    status: Literal["VALIDATION_FAILED"] = Field("VALIDATION_FAILED")
    errors: Dict[str, List[str]] = Field(
        default_factory=dict,
        description="Form field name -> list of error messages",
        examples=[{"amount": ["enter an amount"]}]
    )
    message: Optional[str] = Field(None, description="Summary message")


class InvoiceActionError(BaseModel):
    """The store rejected or failed the write. The cause is never exposed."""
    status: Literal["DATABASE_ERROR"] = Field("DATABASE_ERROR")
    message: str = Field(..., examples=["database error: could not create invoice"])


class InvoiceActionNotFound(BaseModel):
    """Update matched no invoice with the given id."""
    status: Literal["NOT_FOUND"] = Field("NOT_FOUND")
    message: str = Field(..., examples=["invoice not found"])


InvoiceActionResult = Union[
    InvoiceActionSuccess,
    InvoiceFormState,
    InvoiceActionError,
    InvoiceActionNotFound,
]


# --- Read models ---

class InvoiceResponse(BaseModel):
    """
    The persisted invoice record (amount in cents).

    id is assigned by the store on insert and date is the UTC day of
    creation. Neither is ever accepted from a form.
    """
    id: str
    customer_id: str
    amount: int = Field(..., description="Amount in minor units (cents)")
    status: InvoiceStatus
    date: str


class InvoiceListResponse(BaseModel):
    """Response for GET /dashboard/invoices."""
    invoices: List[InvoiceResponse]
    count: int


class InvoiceDeleteResponse(BaseModel):
    """Response after deleting an invoice (delete keeps the user on the list view)."""
    status: Literal["DELETED"] = Field("DELETED")
    invoice_id: str
    message: str = Field(..., examples=["Invoice deleted successfully"])


# --- Validation ---

def extract_invoice_form(form_data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Pull the invoice fields out of raw form data.

    Anything else on the form (id, date, csrf tokens...) is dropped here so
    it can never reach the store.
    """
    return {name: form_data.get(name) for name in FORM_FIELDS}


def _collect_field_errors(exc: ValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = _FIELD_ALIASES.get(str(loc[0])) if loc else None
        if field is None:
            continue
        message = FIELD_ERROR_MESSAGES[field]
        messages = errors.setdefault(field, [])
        if message not in messages:
            messages.append(message)
    return errors


def validate_invoice_form(
    form_data: Mapping[str, Any],
    *,
    schema: Type[InvoiceFields] = CreateInvoice,
    mode: ValidationMode = "raise",
    action: str = "create",
) -> Union[InvoiceFields, InvoiceFormState]:
    """
    Validate raw invoice form input against a narrowed invoice shape.

    Args:
        form_data: Mapping of form field name -> raw value (or missing)
        schema: CreateInvoice or UpdateInvoice
        mode: "raise" to raise on failure, "collect" to return form state
        action: Verb used in the summary message ("create" / "update")

    Returns:
        The validated model, or InvoiceFormState in "collect" mode on failure.

    Raises:
        InvoiceValidationError: In "raise" mode when any field is invalid.
    """
    try:
        return schema.model_validate(extract_invoice_form(form_data))
    except ValidationError as e:
        errors = _collect_field_errors(e)
        if mode == "raise":
            raise InvoiceValidationError(errors) from e
        return InvoiceFormState(
            errors=errors,
            message=VALIDATION_SUMMARY_MESSAGE.format(action=action),
        )
