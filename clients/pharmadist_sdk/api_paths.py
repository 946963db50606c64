from __future__ import annotations


CUSTOMERS = "/customers"
BRANDS = "/brands"
PRODUCTS = "/products"
GROUPS = "/groups"
SUB_GROUPS = "/subgroups"
AREAS = "/areas"
SUB_AREAS = "/subareas"
EMPLOYEES = "/employees"
EXPENSES = "/expenses"
DELIVERY_LOGS = "/delivery-logs"
PURCHASE_INVOICES = "/purchase-entries"
SALES_INVOICES = "/sales-invoices"
LEDGER_TRANSACTIONS = "/ledger/transactions"

LEDGER_SYNC = "/ledger/sync-data"
DELIVERY_LOG_SYNC = "/delivery-logs/sync-missing-invoices"


def item_path(collection: str, item_id: str) -> str:
    return f"{collection.rstrip('/')}/{item_id}"


def toggle_status_path(collection: str, item_id: str) -> str:
    return f"{item_path(collection, item_id)}/toggle-status"
