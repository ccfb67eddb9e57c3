"""
Shared fixtures for the SanMar MCP tests. Nothing here touches the network.
"""

from unittest.mock import MagicMock

import pytest

from sanmar_mcp.config import Credentials

PO_LINE = {"style": "PC61", "color": "White", "size": "XL", "quantity": 2}

PO_ARGUMENTS = {
    "poNum": "PO-1001",
    "shipTo": "Acme Screen Printing",
    "shipAddress1": "123 Main St",
    "shipCity": "Seattle",
    "shipState": "WA",
    "shipZip": "98101",
    "shipMethod": "UPS",
    "shipEmail": "orders@example.com",
    "residence": "N",
    "webServicePoDetailList": [PO_LINE],
}

# A fully correct argument bag for every tool in the catalog
VALID_ARGUMENTS = {
    "get_sanmar_product_info": {"style": "PC61", "color": "White", "size": "XL"},
    "get_sanmar_product_by_brand": {"brand": "Port Authority"},
    "get_sanmar_product_by_category": {"category": "Polos/Knits"},
    "get_sanmar_product_bulk_info": {},
    "get_sanmar_product_delta_info": {},
    "get_ps_product": {"productId": "PC61", "colorName": "White", "apparelSize": "XL"},
    "get_ps_product_closeout": {},
    "get_ps_product_date_modified": {"changeTimeStamp": "2024-01-01T00:00:00.000Z"},
    "get_ps_product_sellable": {"productId": "PC61", "isSellable": True},
    "get_ps_media_content": {"productId": "PC61", "mediaType": "Image", "classType": "1006"},
    "get_sanmar_inventory": {"style": "PC61", "color": "White", "size": "XL"},
    "get_sanmar_inventory_by_warehouse": {"style": "PC61", "warehouse": "12"},
    "get_ps_inventory_levels": {"productId": "PC61", "filter": {"partIdArray": ["9876"]}},
    "get_sanmar_pricing": {"style": "PC61", "color": "White"},
    "get_ps_pricing_config": {"productId": "PC61", "partId": "9876", "priceType": "List"},
    "get_ps_fob_points": {"productId": "PC61"},
    "get_sanmar_invoice_by_invoice_no": {"invoiceNo": "INV-1"},
    "get_sanmar_invoices_by_po": {"purchaseOrderNo": "PO-1001"},
    "get_sanmar_invoices_by_date_range": {"startDate": "2024-01-01", "endDate": "2024-03-01"},
    "get_sanmar_invoices_by_order_date": {"date": "2024-01-15"},
    "get_sanmar_unpaid_invoices": {},
    "get_ps_invoices": {"queryType": "3", "requestedDate": "2024-01-15"},
    "get_sanmar_packing_slip": {"packingSlipId": "LPN123"},
    "get_ps_order_shipment_notification": {"queryType": "1", "referenceNumber": "PO-1001"},
    "get_ps_order_status_types": {},
    "get_ps_order_status_details": {"queryType": "4"},
    "get_ps_order_status": {"queryType": "poSearch", "referenceNumber": "PO123"},
    "get_ps_service_methods": {},
    "get_sanmar_presubmit_info": PO_ARGUMENTS,
    "submit_sanmar_po": PO_ARGUMENTS,
    "get_ps_supported_po_types": {},
    "send_ps_po": {
        "orderType": "Blank",
        "orderNumber": "PO-1001",
        "orderDate": "2024-02-08T00:00:00",
        "totalAmount": 123.45,
        "rush": False,
        "currency": "USD",
        "ShipmentArray": [{"allowConsolidation": False}],
        "LineItemArray": [{"lineNumber": "1"}],
    },
}


@pytest.fixture
def credentials():
    return Credentials(customer_number="123456", username="apiuser", password="s3cret")


@pytest.fixture
def capture_tools():
    """Register a tool module against a stand-in FastMCP and collect its functions."""

    def register(module):
        tools = {}
        options = {}

        def capture_tool(**kwargs):
            def decorator(func):
                tools[func.__name__] = func
                options[func.__name__] = kwargs
                return func
            return decorator

        mock_mcp = MagicMock()
        mock_mcp.tool = capture_tool
        module.register_tools(mock_mcp)
        return tools, options

    return register
