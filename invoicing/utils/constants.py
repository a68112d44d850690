"""
Fixed values shared by the invoice actions and the auth action.

User-facing messages live here so routes, services, and tests agree on the
exact text.
"""

# Table backing the Invoice entity
INVOICES_TABLE = "invoices"

# invoices.amount is a Postgres integer of cents
MAX_AMOUNT_CENTS = 2_147_483_647

# Per-field validation messages, keyed by form field name
FIELD_ERROR_MESSAGES = {
    'customerId': 'select a customer',
    'amount': 'enter an amount',
    'status': 'select a status',
}

# Summary message returned alongside collected field errors
VALIDATION_SUMMARY_MESSAGE = 'missing fields: failed to {action} invoice'

# Store failure messages, one per mutation
DB_ERROR_MESSAGES = {
    'create': 'database error: could not create invoice',
    'update': 'database error: could not update invoice',
    'delete': 'database error: could not delete invoice',
}

INVOICE_NOT_FOUND_MESSAGE = 'invoice not found'

# Supabase Auth reports rejected email/password pairs with this text
INVALID_CREDENTIALS_MARKER = 'Invalid login credentials'

# Short code handed back to the login form for rejected credentials
INVALID_CREDENTIALS_CODE = 'CredentialsSignin'

# Credential scheme accepted by the identity provider adapter
CREDENTIALS_SCHEME = 'credentials'
