"""
Invoice tools for SanMar MCP server

The SanMar invoice service takes a flat envelope (CustomerNo, UserName,
Password and PascalCase business fields) and reports no in-band error flag.
"""

from typing import Any, Optional

from fastmcp import Context

from .envelopes import promostandards, sanmar_invoice
from .gateway import dispatch, tool_options
from .outcomes import promostandards_error
from .registry import ALWAYS, FieldSpec, OperationDescriptor, RequiredWhen

INVOICE_QUERY_TYPES = ("1", "2", "3", "4")

OPERATIONS = [
    OperationDescriptor(
        name="get_sanmar_invoice_by_invoice_no",
        description="Retrieves SanMar invoice information by invoice number.",
        endpoint="invoice",
        procedure="GetInvoiceByInvoiceNo",
        argument_schema=(
            FieldSpec("invoiceNo", requirement=ALWAYS, description="SanMar invoice number"),
        ),
        shape=sanmar_invoice({"invoiceNo": "InvoiceNo"}),
    ),
    OperationDescriptor(
        name="get_sanmar_invoices_by_po",
        description="Retrieves SanMar invoice information by purchase order number.",
        endpoint="invoice",
        procedure="GetInvoicesByPurchaseOrderNo",
        argument_schema=(
            FieldSpec("purchaseOrderNo", requirement=ALWAYS, description="Purchase order number"),
        ),
        shape=sanmar_invoice({"purchaseOrderNo": "PurchaseOrderNo"}),
    ),
    OperationDescriptor(
        name="get_sanmar_invoices_by_date_range",
        description="Retrieves SanMar invoice information by invoice date range (max 3 months).",
        endpoint="invoice",
        procedure="GetInvoicesByInvoiceDateRange",
        argument_schema=(
            FieldSpec("startDate", requirement=ALWAYS, description="Start date (YYYY-MM-DD)"),
            FieldSpec("endDate", requirement=ALWAYS, description="End date (YYYY-MM-DD)"),
        ),
        shape=sanmar_invoice({"startDate": "StartDate", "endDate": "EndDate"}),
    ),
    OperationDescriptor(
        name="get_sanmar_invoices_by_order_date",
        description="Retrieves SanMar invoice information by order date.",
        endpoint="invoice",
        procedure="GetInvoicesByOrderDate",
        argument_schema=(
            FieldSpec("date", requirement=ALWAYS, description="Order date (YYYY-MM-DD)"),
        ),
        shape=sanmar_invoice({"date": "Date"}),
    ),
    OperationDescriptor(
        name="get_sanmar_unpaid_invoices",
        description="Retrieves all unpaid SanMar invoices.",
        endpoint="invoice",
        procedure="GetUnpaidInvoices",
        argument_schema=(),
        shape=sanmar_invoice({}),
    ),
    OperationDescriptor(
        name="get_ps_invoices",
        description="Retrieves invoices using PromoStandards Invoice Service.",
        endpoint="ps_invoice",
        procedure="getInvoices",
        argument_schema=(
            FieldSpec("queryType", requirement=ALWAYS, choices=INVOICE_QUERY_TYPES,
                      description="Type of query"),
            FieldSpec("referenceNumber", requirement=RequiredWhen("queryType", {"1", "2"}),
                      description="Purchase order or invoice number"),
            FieldSpec("requestedDate", requirement=RequiredWhen("queryType", {"3"}),
                      description="Date in YYYY-MM-DD format"),
            FieldSpec("availableTimeStamp", requirement=RequiredWhen("queryType", {"4"}),
                      description="ISO 8601 timestamp"),
        ),
        shape=promostandards(
            "1.0.0",
            fields=("queryType", "referenceNumber", "requestedDate", "availableTimeStamp"),
        ),
        extract_domain_error=promostandards_error,
    ),
]


def register_tools(mcp):
    """Register invoice-related tools with the FastMCP server"""

    @mcp.tool(**tool_options("get_sanmar_invoice_by_invoice_no"))
    async def get_sanmar_invoice_by_invoice_no(invoiceNo: str, ctx: Context = None) -> Any:
        return await dispatch("get_sanmar_invoice_by_invoice_no", {"invoiceNo": invoiceNo}, ctx)

    @mcp.tool(**tool_options("get_sanmar_invoices_by_po"))
    async def get_sanmar_invoices_by_po(purchaseOrderNo: str, ctx: Context = None) -> Any:
        return await dispatch(
            "get_sanmar_invoices_by_po", {"purchaseOrderNo": purchaseOrderNo}, ctx
        )

    @mcp.tool(**tool_options("get_sanmar_invoices_by_date_range"))
    async def get_sanmar_invoices_by_date_range(
        startDate: str, endDate: str, ctx: Context = None
    ) -> Any:
        """
        Get SanMar invoices dated within a range.

        Args:
            startDate: First invoice date (YYYY-MM-DD)
            endDate: Last invoice date (YYYY-MM-DD), at most 3 months after startDate
        """
        return await dispatch(
            "get_sanmar_invoices_by_date_range",
            {"startDate": startDate, "endDate": endDate},
            ctx,
        )

    @mcp.tool(**tool_options("get_sanmar_invoices_by_order_date"))
    async def get_sanmar_invoices_by_order_date(date: str, ctx: Context = None) -> Any:
        return await dispatch("get_sanmar_invoices_by_order_date", {"date": date}, ctx)

    @mcp.tool(**tool_options("get_sanmar_unpaid_invoices"))
    async def get_sanmar_unpaid_invoices(ctx: Context = None) -> Any:
        return await dispatch("get_sanmar_unpaid_invoices", {}, ctx)

    @mcp.tool(**tool_options("get_ps_invoices"))
    async def get_ps_invoices(
        queryType: str,
        referenceNumber: Optional[str] = None,
        requestedDate: Optional[str] = None,
        availableTimeStamp: Optional[str] = None,
        ctx: Context = None,
    ) -> Any:
        """
        Get PromoStandards invoices.

        Args:
            queryType: 1 = by PO number, 2 = by invoice number, 3 = by date,
                       4 = available since a timestamp
            referenceNumber: PO or invoice number (queryType 1 or 2)
            requestedDate: Invoice date, YYYY-MM-DD (queryType 3)
            availableTimeStamp: ISO 8601 timestamp (queryType 4)
        """
        return await dispatch(
            "get_ps_invoices",
            {
                "queryType": queryType,
                "referenceNumber": referenceNumber,
                "requestedDate": requestedDate,
                "availableTimeStamp": availableTimeStamp,
            },
            ctx,
        )
