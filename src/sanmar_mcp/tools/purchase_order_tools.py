"""
Purchase order tools for SanMar MCP server

submit_sanmar_po and send_ps_po place real orders; they are the only tools in
the catalog without a read-only hint.
"""

from typing import Any, Dict, List, Mapping, Optional

from fastmcp import Context

from ..config import Credentials
from .envelopes import pick, promostandards, sanmar_standard
from .gateway import dispatch, tool_options
from .outcomes import promostandards_error, return_body, sanmar_error_flag
from .registry import ALWAYS, FieldSpec, OperationDescriptor

ORDER_TYPES = ("Blank", "Sample", "Simple", "Configured")

DETAIL_LINE_SCHEMA = {
    "items": {
        "type": "object",
        "properties": {
            "style": {"type": "string"},
            "color": {"type": "string", "description": "SanMar mainframe color"},
            "size": {"type": "string"},
            "quantity": {"type": "integer"},
            "inventoryKey": {"type": "integer"},
            "sizeIndex": {"type": "integer"},
            "whseNo": {"type": "integer", "description": "Warehouse to ship from"},
        },
        "required": ["quantity"],
    }
}


def check_detail_lines(lines: List[Any]) -> Optional[str]:
    """
    Every PO line needs an integer quantity and must identify the product by
    style + color + size or by inventoryKey + sizeIndex.
    """
    if not lines:
        return "'webServicePoDetailList' must contain at least one line"
    for index, line in enumerate(lines):
        where = f"webServicePoDetailList[{index}]"
        if not isinstance(line, Mapping):
            return f"{where} must be an object"
        quantity = line.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            return f"{where} needs an integer quantity"
        by_style = all(line.get(key) not in (None, "") for key in ("style", "color", "size"))
        by_key = all(line.get(key) is not None for key in ("inventoryKey", "sizeIndex"))
        if not (by_style or by_key):
            return f"{where} needs style, color and size or inventoryKey and sizeIndex"
    return None


PO_FIELDS = (
    FieldSpec("poNum", requirement=ALWAYS, description="Purchase order number"),
    FieldSpec("shipTo", description="Company name"),
    FieldSpec("shipAddress1", requirement=ALWAYS),
    FieldSpec("shipAddress2"),
    FieldSpec("shipCity", requirement=ALWAYS),
    FieldSpec("shipState", requirement=ALWAYS, max_length=2, description="Two-letter state code"),
    FieldSpec("shipZip", requirement=ALWAYS, min_length=5, max_length=10),
    FieldSpec("shipMethod", requirement=ALWAYS, description="Carrier service (e.g., UPS)"),
    FieldSpec("shipEmail", requirement=ALWAYS),
    FieldSpec("residence", requirement=ALWAYS, choices=("Y", "N")),
    FieldSpec("attention"),
    FieldSpec("webServicePoDetailList", kind="array", requirement=ALWAYS,
              schema=DETAIL_LINE_SCHEMA, check=check_detail_lines,
              description="Order lines"),
)
PO_FIELD_NAMES = tuple(spec.name for spec in PO_FIELDS)

SEND_PO_FIELDS = (
    FieldSpec("orderType", requirement=ALWAYS, choices=ORDER_TYPES),
    FieldSpec("orderNumber", requirement=ALWAYS, max_length=28),
    FieldSpec("orderDate", requirement=ALWAYS, description="Order date-time (e.g., 2022-02-08T00:00:00)"),
    FieldSpec("totalAmount", kind="number", requirement=ALWAYS),
    FieldSpec("rush", kind="boolean", requirement=ALWAYS),
    FieldSpec("currency", requirement=ALWAYS, choices=("USD",)),
    FieldSpec("ShipmentArray", kind="array", requirement=ALWAYS,
              schema={"items": {"type": "object"}},
              description="Shipments with FreightDetails and ShipTo contact details"),
    FieldSpec("LineItemArray", kind="array", requirement=ALWAYS,
              schema={"items": {"type": "object"}},
              description="Line items with ToleranceDetails and PartArray"),
    FieldSpec("termsAndConditions", max_length=255),
    FieldSpec("salesChannel", max_length=3, description="Department code"),
)

po_error = sanmar_error_flag("errorOccurred")


def _send_po_request(arguments: Mapping[str, Any], credentials: Credentials) -> Dict[str, Any]:
    envelope = promostandards("1.0.0")(arguments, credentials)
    envelope["PO"] = pick(arguments, [spec.name for spec in SEND_PO_FIELDS])
    return envelope


OPERATIONS = [
    OperationDescriptor(
        name="get_sanmar_presubmit_info",
        description="Checks inventory availability before submitting a PO (SanMar Standard).",
        endpoint="po_service",
        procedure="getPreSubmitInfo",
        argument_schema=PO_FIELDS,
        shape=sanmar_standard(PO_FIELD_NAMES),
        extract_success=return_body,
        extract_domain_error=po_error,
    ),
    OperationDescriptor(
        name="submit_sanmar_po",
        description="Submits a Purchase Order using the SanMar Standard service.",
        endpoint="po_service",
        procedure="submitPO",
        argument_schema=PO_FIELDS,
        shape=sanmar_standard(PO_FIELD_NAMES),
        extract_success=return_body,
        extract_domain_error=po_error,
        read_only=False,
    ),
    OperationDescriptor(
        name="get_ps_supported_po_types",
        description='Retrieves the supported PO types (PromoStandards). Should return "Blank".',
        endpoint="ps_po_service",
        procedure="GetSupportedOrderTypes",
        argument_schema=(),
        shape=promostandards("1.0.0"),
        extract_domain_error=promostandards_error,
    ),
    OperationDescriptor(
        name="send_ps_po",
        description="Submits a Purchase Order using the PromoStandards service.",
        endpoint="ps_po_service",
        procedure="SendPO",
        argument_schema=SEND_PO_FIELDS,
        shape=_send_po_request,
        extract_domain_error=promostandards_error,
        read_only=False,
    ),
]


def register_tools(mcp):
    """Register purchase order tools with the FastMCP server"""

    @mcp.tool(**tool_options("get_sanmar_presubmit_info"))
    async def get_sanmar_presubmit_info(
        poNum: str,
        shipAddress1: str,
        shipCity: str,
        shipState: str,
        shipZip: str,
        shipMethod: str,
        shipEmail: str,
        residence: str,
        webServicePoDetailList: List[Dict[str, Any]],
        shipTo: Optional[str] = None,
        shipAddress2: Optional[str] = None,
        attention: Optional[str] = None,
        ctx: Context = None,
    ) -> Any:
        """
        Check stock for a SanMar PO without placing it.

        Each line needs a quantity and either style/color/size or
        inventoryKey/sizeIndex.
        """
        return await dispatch(
            "get_sanmar_presubmit_info",
            {
                "poNum": poNum,
                "shipTo": shipTo,
                "shipAddress1": shipAddress1,
                "shipAddress2": shipAddress2,
                "shipCity": shipCity,
                "shipState": shipState,
                "shipZip": shipZip,
                "shipMethod": shipMethod,
                "shipEmail": shipEmail,
                "residence": residence,
                "attention": attention,
                "webServicePoDetailList": webServicePoDetailList,
            },
            ctx,
        )

    @mcp.tool(**tool_options("submit_sanmar_po"))
    async def submit_sanmar_po(
        poNum: str,
        shipAddress1: str,
        shipCity: str,
        shipState: str,
        shipZip: str,
        shipMethod: str,
        shipEmail: str,
        residence: str,
        webServicePoDetailList: List[Dict[str, Any]],
        shipTo: Optional[str] = None,
        shipAddress2: Optional[str] = None,
        attention: Optional[str] = None,
        ctx: Context = None,
    ) -> Any:
        """
        Place a SanMar PO.

        Returns:
            The submitPO response, {"errorOccurred": false, "message": ...} on success
        """
        return await dispatch(
            "submit_sanmar_po",
            {
                "poNum": poNum,
                "shipTo": shipTo,
                "shipAddress1": shipAddress1,
                "shipAddress2": shipAddress2,
                "shipCity": shipCity,
                "shipState": shipState,
                "shipZip": shipZip,
                "shipMethod": shipMethod,
                "shipEmail": shipEmail,
                "residence": residence,
                "attention": attention,
                "webServicePoDetailList": webServicePoDetailList,
            },
            ctx,
        )

    @mcp.tool(**tool_options("get_ps_supported_po_types"))
    async def get_ps_supported_po_types(ctx: Context = None) -> Any:
        return await dispatch("get_ps_supported_po_types", {}, ctx)

    @mcp.tool(**tool_options("send_ps_po"))
    async def send_ps_po(
        orderType: str,
        orderNumber: str,
        orderDate: str,
        totalAmount: float,
        rush: bool,
        currency: str,
        ShipmentArray: List[Dict[str, Any]],
        LineItemArray: List[Dict[str, Any]],
        termsAndConditions: Optional[str] = None,
        salesChannel: Optional[str] = None,
        ctx: Context = None,
    ) -> Any:
        return await dispatch(
            "send_ps_po",
            {
                "orderType": orderType,
                "orderNumber": orderNumber,
                "orderDate": orderDate,
                "totalAmount": totalAmount,
                "rush": rush,
                "currency": currency,
                "ShipmentArray": ShipmentArray,
                "LineItemArray": LineItemArray,
                "termsAndConditions": termsAndConditions,
                "salesChannel": salesChannel,
            },
            ctx,
        )
