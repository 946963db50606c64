from __future__ import annotations

from collections.abc import Callable
from typing import Any

from clients.pharmadist_sdk import api_paths
from clients.pharmadist_sdk.normalizers import promote_id
from pharmadist_console.app.remote_table import TableOptions
from pharmadist_console.app.ui.filters import FilterDefinition, FilterKind, FilterPanel, options, status_filter
from pharmadist_console.app.ui.row_model import ColumnDefinition, lookup_path

PAYMENT_STATUS_OPTIONS = options(("paid", "Paid"), ("partial", "Partial Payment"), ("unpaid", "Unpaid"))


def _status(row: dict[str, Any]) -> str:
    return "Active" if row.get("isActive") else "Inactive"


def _with_status(rows: list[Any]) -> list[Any]:
    return [{**row, "status": _status(row)} if isinstance(row, dict) else row for row in promote_id(rows)]


def _nested(path: str, default: str = "N/A") -> Callable[[Any], Any]:
    def render(row: Any) -> Any:
        value = lookup_path(row, path)
        return default if value in (None, "") else value

    return render


def customers() -> TableOptions:
    return TableOptions(
        api_path=api_paths.CUSTOMERS,
        cache_namespace="get-all-customers",
        title="Customers",
        columns=(
            ColumnDefinition("customerName", "Customer"),
            ColumnDefinition("customerCategory", "Category"),
            ColumnDefinition("customerCity", "Location"),
            ColumnDefinition("customerContact", "Contact", sortable=False),
            ColumnDefinition("licenseStatus", "License Status", accessor="licenseExpiryDate"),
            ColumnDefinition("status", "Status"),
        ),
        filters=FilterPanel(
            filters=(
                FilterDefinition(label="Province", key="customerProvince", placeholder="Select Province"),
                FilterDefinition(label="Cities", key="customerCity", placeholder="Select City"),
            )
        ),
        enable_selection=True,
        transform_rows=_with_status,
    )


def brands() -> TableOptions:
    return TableOptions(
        api_path=api_paths.BRANDS,
        cache_namespace="get-all-brands",
        title="Brands",
        columns=(
            ColumnDefinition("brandName", "Brand"),
            ColumnDefinition("address", "Address", sortable=False),
            ColumnDefinition("status", "Status"),
        ),
        filters=FilterPanel(filters=(status_filter(),)),
        enable_selection=True,
        transform_rows=_with_status,
    )


def products() -> TableOptions:
    return TableOptions(
        api_path=api_paths.PRODUCTS,
        cache_namespace="get-all-products",
        title="Products",
        columns=(
            ColumnDefinition("productName", "Product"),
            ColumnDefinition("brand", "Brand", cell_renderer=_nested("brandId.brandName"), accessor="brandId.brandName"),
            ColumnDefinition("group", "Group/Category", cell_renderer=_nested("groupId.group"), accessor="groupId.group"),
            ColumnDefinition("packingSize", "Packaging"),
            ColumnDefinition("status", "Status"),
        ),
        filters=FilterPanel(
            filters=(
                FilterDefinition(label="Brand", key="brandId", placeholder="Select Brand"),
                FilterDefinition(label="Group", key="groupId", placeholder="Select Group"),
                status_filter(),
            )
        ),
        transform_rows=_with_status,
    )


def groups() -> TableOptions:
    return TableOptions(
        api_path=api_paths.GROUPS,
        cache_namespace="get-all-groups",
        title="Groups",
        columns=(
            ColumnDefinition("group", "Group"),
            ColumnDefinition("subGroup", "Sub Group"),
            ColumnDefinition("brand", "Brand", cell_renderer=_nested("brandId.brandName"), accessor="brandId.brandName"),
            ColumnDefinition("status", "Status"),
        ),
        filters=FilterPanel(
            filters=(
                FilterDefinition(label="Brand", key="brandId", placeholder="Select Brand"),
                FilterDefinition(label="Group", key="group", placeholder="Select Group"),
                status_filter(),
            )
        ),
        transform_rows=_with_status,
    )


def employees() -> TableOptions:
    return TableOptions(
        api_path=api_paths.EMPLOYEES,
        cache_namespace="get-all-employees",
        title="Employees",
        columns=(
            ColumnDefinition("employeeName", "Employee"),
            ColumnDefinition("designation", "Designation"),
            ColumnDefinition("city", "Location"),
            ColumnDefinition("contact", "Contact", sortable=False),
            ColumnDefinition("salary", "Salary"),
            ColumnDefinition("createdAt", "Created Date"),
            ColumnDefinition("status", "Status"),
        ),
        filters=FilterPanel(
            filters=(
                FilterDefinition(label="Designation", key="designation", placeholder="Select Designation"),
                status_filter(),
            )
        ),
        transform_rows=_with_status,
    )


def expenses() -> TableOptions:
    return TableOptions(
        api_path=api_paths.EXPENSES,
        cache_namespace="get-all-expenses",
        title="Expenses",
        columns=(
            ColumnDefinition("description", "Description", sortable=False),
            ColumnDefinition("expenseCategory", "Category"),
            ColumnDefinition("expenseDate", "Date"),
            ColumnDefinition("amount", "Amount"),
            ColumnDefinition("updatedAt", "Updated Date"),
            ColumnDefinition("status", "Status"),
        ),
        filters=FilterPanel(
            filters=(
                status_filter(),
                FilterDefinition(label="Category", key="expenseCategory", placeholder="Select Category"),
                FilterDefinition(label="Date", key="expenseDate", kind=FilterKind.DATE),
            )
        ),
        transform_rows=_with_status,
    )


def delivery_logs() -> TableOptions:
    def flatten(rows: list[Any]) -> list[Any]:
        return [
            {**row, "salesmanName": lookup_path(row, "salesmanId.employeeName") or "Unknown"} if isinstance(row, dict) else row
            for row in promote_id(rows)
        ]

    return TableOptions(
        api_path=api_paths.DELIVERY_LOGS,
        cache_namespace="get-all-delivery-logs",
        title="Delivery Logs",
        columns=(
            ColumnDefinition("date", "Date"),
            ColumnDefinition("salesmanName", "Salesman"),
            ColumnDefinition("invoiceNumbers", "Invoices", cell_renderer=lambda row: ", ".join(map(str, row.get("invoiceNumbers") or [])), sortable=False),
        ),
        filters=FilterPanel(
            filters=(
                FilterDefinition(label="Salesman", key="salesmanId", placeholder="Select Salesman"),
                FilterDefinition(label="Date", key="date", kind=FilterKind.DATE),
            )
        ),
        enable_selection=True,
        transform_rows=flatten,
    )


def purchase_invoices() -> TableOptions:
    return TableOptions(
        api_path=api_paths.PURCHASE_INVOICES,
        cache_namespace="get-all-purchase-invoices",
        title="Purchase Invoices",
        columns=(
            ColumnDefinition("invoiceNumber", "Invoice #"),
            ColumnDefinition("brand", "Brand", cell_renderer=_nested("brandId.brandName"), accessor="brandId.brandName"),
            ColumnDefinition("invoiceDate", "Invoice Date"),
            ColumnDefinition("grossTotal", "Gross Total"),
            ColumnDefinition("grandTotal", "Grand Total"),
            ColumnDefinition("paidAmount", "Paid Amount"),
            ColumnDefinition("creditAmount", "Credit Amount"),
            ColumnDefinition("paymentStatus", "Payment Status"),
            ColumnDefinition("status", "Status"),
        ),
        filters=FilterPanel(
            filters=(
                FilterDefinition(label="Brand", key="brandId", placeholder="Select Brand"),
                FilterDefinition(
                    label="Payment Status",
                    key="paymentStatus",
                    options=PAYMENT_STATUS_OPTIONS,
                    placeholder="Select Payment Status",
                ),
                status_filter(),
            )
        ),
        transform_rows=_with_status,
    )


def sales_invoices() -> TableOptions:
    return TableOptions(
        api_path=api_paths.SALES_INVOICES,
        cache_namespace="get-all-sales-invoices",
        title="Sales Invoices",
        columns=(
            ColumnDefinition("invoiceNumber", "Invoice #"),
            ColumnDefinition("customer", "Customer", cell_renderer=_nested("customerId.customerName"), accessor="customerId.customerName"),
            ColumnDefinition("invoiceDate", "Date"),
            ColumnDefinition("totalAmount", "Total Amount"),
            ColumnDefinition("deliveredBy", "Delivered By", cell_renderer=_nested("deliverBy.employeeName"), accessor="deliverBy.employeeName"),
            ColumnDefinition("cashPaid", "Cash Paid (Total Paid)"),
            ColumnDefinition("balance", "Balance (Credit)"),
            ColumnDefinition("paymentStatus", "Payment Status"),
            ColumnDefinition("status", "Status"),
        ),
        filters=FilterPanel(
            filters=(
                FilterDefinition(label="Customers", key="customerId", placeholder="Select Customer"),
                FilterDefinition(
                    label="Payment Status",
                    key="paymentStatus",
                    options=PAYMENT_STATUS_OPTIONS,
                    placeholder="Select Payment Status",
                ),
                FilterDefinition(label="Delivered By", key="deliverBy", placeholder="Select Employee"),
                status_filter(),
            )
        ),
        transform_rows=_with_status,
    )


PAGES: dict[str, Callable[[], TableOptions]] = {
    "customers": customers,
    "brands": brands,
    "products": products,
    "groups": groups,
    "employees": employees,
    "expenses": expenses,
    "delivery-logs": delivery_logs,
    "purchase-invoices": purchase_invoices,
    "sales-invoices": sales_invoices,
}


def get_page(name: str) -> TableOptions:
    try:
        return PAGES[name]()
    except KeyError as exc:
        raise KeyError(f"unknown listing page '{name}', expected one of: {', '.join(sorted(PAGES))}") from exc
