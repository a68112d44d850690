"""
Tests for the invoice actions.

Each action is checked for:
- the exact statement sent to the invoices table
- the outcome returned (success / form state / database error / not found)
- no write on invalid input
"""

import re
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from invoicing.schemas.invoices import (
    InvoiceActionError,
    InvoiceActionNotFound,
    InvoiceActionSuccess,
    InvoiceFormState,
    InvoiceValidationError,
)
from invoicing.services.invoice_service import (
    create_invoice,
    create_invoice_with_state,
    current_invoice_date,
    delete_invoice,
    get_invoice_by_id,
    get_invoices,
    update_invoice,
    update_invoice_with_state,
)


class TestCurrentInvoiceDate:

    def test_is_utc_day(self):
        before = datetime.now(timezone.utc).date().isoformat()
        result = current_invoice_date()
        after = datetime.now(timezone.utc).date().isoformat()

        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", result)
        assert result in (before, after)


class TestCreateInvoice:
    """Test invoice creation."""

    @pytest.mark.asyncio
    async def test_inserts_cents_and_date(self, supabase_client):
        """customerId c1, amount 49.99, pending -> insert with 4999 cents."""
        with patch(
            "invoicing.services.invoice_service.current_invoice_date",
            return_value="2026-10-18",
        ):
            outcome = await create_invoice_with_state(
                supabase_client,
                None,
                {"customerId": "c1", "amount": "49.99", "status": "pending"},
            )

        supabase_client.table.assert_called_once_with("invoices")
        supabase_client.table.return_value.insert.assert_called_once_with({
            "customer_id": "c1",
            "amount": 4999,
            "status": "pending",
            "date": "2026-10-18",
        })
        supabase_client.table.return_value.insert.return_value.execute.assert_called_once()

        assert isinstance(outcome, InvoiceActionSuccess)
        assert outcome.redirect_to == "/dashboard/invoices"
        assert outcome.revalidate == ["/dashboard/invoices"]

    @pytest.mark.asyncio
    async def test_insert_never_carries_id(self, supabase_client):
        await create_invoice(
            supabase_client,
            {"id": "forged", "customerId": "c1", "amount": "1", "status": "paid"},
        )

        inserted = supabase_client.table.return_value.insert.call_args[0][0]
        assert "id" not in inserted

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", ["0", "-3"])
    async def test_non_positive_amount_returns_form_state(self, supabase_client, amount):
        outcome = await create_invoice_with_state(
            supabase_client,
            None,
            {"customerId": "c1", "amount": amount, "status": "pending"},
        )

        assert isinstance(outcome, InvoiceFormState)
        assert "amount" in outcome.errors
        supabase_client.table.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", ["0.001", "1e30"])
    async def test_unstorable_amount_returns_form_state(self, supabase_client, amount):
        outcome = await create_invoice_with_state(
            supabase_client,
            None,
            {"customerId": "c1", "amount": amount, "status": "pending"},
        )

        assert isinstance(outcome, InvoiceFormState)
        assert outcome.errors == {"amount": ["enter an amount"]}
        supabase_client.table.assert_not_called()

    @pytest.mark.asyncio
    async def test_raising_variant_raises_without_writing(self, supabase_client):
        with pytest.raises(InvoiceValidationError) as exc_info:
            await create_invoice(
                supabase_client,
                {"customerId": "c1", "amount": "10", "status": "overdue"},
            )

        assert exc_info.value.errors == {"status": ["select a status"]}
        supabase_client.table.assert_not_called()

    @pytest.mark.asyncio
    async def test_database_failure_returns_fixed_message(self, supabase_client):
        execute = supabase_client.table.return_value.insert.return_value.execute
        execute.side_effect = Exception("connection refused: secret-host:5432")

        outcome = await create_invoice(
            supabase_client,
            {"customerId": "c1", "amount": "10", "status": "pending"},
        )

        assert isinstance(outcome, InvoiceActionError)
        assert outcome.message == "database error: could not create invoice"
        assert "secret-host" not in outcome.model_dump_json()


class TestUpdateInvoice:
    """Test invoice updates."""

    @pytest.mark.asyncio
    async def test_updates_by_id_without_touching_date(self, supabase_client):
        """inv1 with customerId c2, amount 10, paid -> amount 1000, date untouched."""
        table = supabase_client.table.return_value
        table.update.return_value.eq.return_value.execute.return_value = MagicMock(
            data=[{"id": "inv1"}]
        )

        outcome = await update_invoice_with_state(
            supabase_client,
            "inv1",
            None,
            {"customerId": "c2", "amount": "10", "status": "paid"},
        )

        supabase_client.table.assert_called_once_with("invoices")
        table.update.assert_called_once_with({
            "customer_id": "c2",
            "amount": 1000,
            "status": "paid",
        })
        table.update.return_value.eq.assert_called_once_with("id", "inv1")

        assert isinstance(outcome, InvoiceActionSuccess)
        assert outcome.redirect_to == "/dashboard/invoices"
        assert outcome.revalidate == ["/dashboard/invoices"]

    @pytest.mark.asyncio
    async def test_payload_ignores_id_and_date_from_form(self, supabase_client):
        table = supabase_client.table.return_value
        table.update.return_value.eq.return_value.execute.return_value = MagicMock(
            data=[{"id": "inv1"}]
        )

        await update_invoice(
            supabase_client,
            "inv1",
            {
                "id": "inv2",
                "date": "2001-01-01",
                "customerId": "c2",
                "amount": "10",
                "status": "paid",
            },
        )

        payload = table.update.call_args[0][0]
        assert set(payload.keys()) == {"customer_id", "amount", "status"}
        table.update.return_value.eq.assert_called_once_with("id", "inv1")

    @pytest.mark.asyncio
    async def test_no_matching_row_returns_not_found(self, supabase_client):
        table = supabase_client.table.return_value
        table.update.return_value.eq.return_value.execute.return_value = MagicMock(data=[])

        outcome = await update_invoice(
            supabase_client,
            "missing",
            {"customerId": "c2", "amount": "10", "status": "paid"},
        )

        assert isinstance(outcome, InvoiceActionNotFound)
        assert outcome.message == "invoice not found"

    @pytest.mark.asyncio
    async def test_invalid_form_returns_form_state(self, supabase_client):
        outcome = await update_invoice_with_state(
            supabase_client,
            "inv1",
            None,
            {"customerId": "", "amount": "-1", "status": "paid"},
        )

        assert isinstance(outcome, InvoiceFormState)
        assert outcome.errors == {
            "customerId": ["select a customer"],
            "amount": ["enter an amount"],
        }
        assert outcome.message == "missing fields: failed to update invoice"
        supabase_client.table.assert_not_called()

    @pytest.mark.asyncio
    async def test_database_failure_returns_fixed_message(self, supabase_client):
        table = supabase_client.table.return_value
        table.update.return_value.eq.return_value.execute.side_effect = Exception("boom")

        outcome = await update_invoice(
            supabase_client,
            "inv1",
            {"customerId": "c2", "amount": "10", "status": "paid"},
        )

        assert isinstance(outcome, InvoiceActionError)
        assert outcome.message == "database error: could not update invoice"


class TestDeleteInvoice:
    """Test invoice deletion."""

    @pytest.mark.asyncio
    async def test_deletes_by_id_and_revalidates_without_redirect(self, supabase_client):
        table = supabase_client.table.return_value
        table.delete.return_value.eq.return_value.execute.return_value = MagicMock(
            data=[{"id": "inv1"}]
        )

        outcome = await delete_invoice(supabase_client, "inv1")

        supabase_client.table.assert_called_once_with("invoices")
        table.delete.return_value.eq.assert_called_once_with("id", "inv1")
        assert isinstance(outcome, InvoiceActionSuccess)
        assert outcome.redirect_to is None
        assert outcome.revalidate == ["/dashboard/invoices"]

    @pytest.mark.asyncio
    async def test_missing_id_is_still_success(self, supabase_client):
        table = supabase_client.table.return_value
        table.delete.return_value.eq.return_value.execute.return_value = MagicMock(data=[])

        outcome = await delete_invoice(supabase_client, "never-existed")

        assert isinstance(outcome, InvoiceActionSuccess)

    @pytest.mark.asyncio
    async def test_database_failure_returns_fixed_message(self, supabase_client):
        table = supabase_client.table.return_value
        table.delete.return_value.eq.return_value.execute.side_effect = Exception("boom")

        outcome = await delete_invoice(supabase_client, "inv1")

        assert isinstance(outcome, InvoiceActionError)
        assert outcome.message == "database error: could not delete invoice"


class TestReads:
    """Test invoice reads used by the list view and edit form."""

    @pytest.mark.asyncio
    async def test_get_invoices_orders_newest_first(self, supabase_client):
        select = supabase_client.table.return_value.select.return_value
        select.order.return_value.execute.return_value = MagicMock(data=[
            {"id": "inv-2", "customer_id": "c1", "amount": 100, "status": "paid", "date": "2026-10-18"},
            {"id": "inv-1", "customer_id": "c1", "amount": 200, "status": "pending", "date": "2026-10-01"},
        ])

        result = await get_invoices(supabase_client)

        select.order.assert_called_once_with("date", desc=True)
        assert [inv["id"] for inv in result] == ["inv-2", "inv-1"]

    @pytest.mark.asyncio
    async def test_get_invoice_by_id_returns_none_when_missing(self, supabase_client):
        select = supabase_client.table.return_value.select.return_value
        select.eq.return_value.execute.return_value = MagicMock(data=[])

        result = await get_invoice_by_id(supabase_client, "missing")

        select.eq.assert_called_once_with("id", "missing")
        assert result is None
