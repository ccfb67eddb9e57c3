"""
Order status, shipment and packing slip tools for SanMar MCP server
"""

from typing import Any, Dict, Mapping, Optional

from fastmcp import Context

from ..config import Credentials
from .envelopes import pick, promostandards
from .gateway import dispatch, tool_options
from .outcomes import promostandards_error
from .registry import ALWAYS, FieldSpec, OperationDescriptor, RequiredWhen

SHIPMENT_QUERY_TYPES = ("1", "2", "3")
STATUS_QUERY_TYPES = ("1", "2", "3", "4")
STATUS_V2_QUERY_TYPES = ("poSearch", "soSearch", "lastUpdate", "allOpen", "allOpenIssues")
ISSUE_DETAIL_TYPES = ("noIssues", "openIssues", "allIssues")


def _packing_slip_request(arguments: Mapping[str, Any], credentials: Credentials) -> Dict[str, Any]:
    # The LPN service authenticates with UserId/Password instead of id/password
    envelope = {
        "wsVersion": "1.0.0",
        "UserId": credentials.username,
        "Password": credentials.password,
    }
    envelope.update(pick(arguments, ("packingSlipId",), {"packingSlipId": "PackingSlipId"}))
    return envelope


def _query_type(choices):
    return FieldSpec("queryType", requirement=ALWAYS, choices=choices, description="Type of query")


OPERATIONS = [
    OperationDescriptor(
        name="get_sanmar_packing_slip",
        description="Retrieves packing slip information for a specific LPN (License Plate Number).",
        endpoint="packing_slip",
        procedure="GetPackingSlip",
        argument_schema=(
            FieldSpec("packingSlipId", requirement=ALWAYS, description="License Plate Number (LPN)"),
        ),
        shape=_packing_slip_request,
    ),
    OperationDescriptor(
        name="get_ps_order_shipment_notification",
        description=(
            "Retrieves order shipment notifications using PromoStandards Order "
            "Shipment Notification Service."
        ),
        endpoint="ps_order_shipment",
        procedure="getOrderShipmentNotification",
        argument_schema=(
            _query_type(SHIPMENT_QUERY_TYPES),
            FieldSpec("referenceNumber", requirement=RequiredWhen("queryType", {"1", "2"}),
                      description="Purchase order or sales order number"),
            FieldSpec("shipmentDateTimeStamp", requirement=RequiredWhen("queryType", {"3"}),
                      description="ISO 8601 timestamp"),
        ),
        shape=promostandards(
            "1.0.0", fields=("queryType", "referenceNumber", "shipmentDateTimeStamp")
        ),
        extract_domain_error=promostandards_error,
    ),
    OperationDescriptor(
        name="get_ps_order_status_types",
        description="Retrieves order status types using PromoStandards Order Status Service.",
        endpoint="ps_order_status",
        procedure="getOrderStatusTypes",
        argument_schema=(),
        shape=promostandards("1.0.0"),
        extract_domain_error=promostandards_error,
    ),
    OperationDescriptor(
        name="get_ps_order_status_details",
        description="Retrieves order status details using PromoStandards Order Status Service.",
        endpoint="ps_order_status",
        procedure="getOrderStatusDetails",
        argument_schema=(
            _query_type(STATUS_QUERY_TYPES),
            FieldSpec("referenceNumber", requirement=RequiredWhen("queryType", {"1", "2"}),
                      description="Purchase order or sales order number"),
            FieldSpec("statusTimeStamp", requirement=RequiredWhen("queryType", {"3"}),
                      description="ISO 8601 timestamp"),
        ),
        shape=promostandards("1.0.0", fields=("queryType", "referenceNumber", "statusTimeStamp")),
        extract_domain_error=promostandards_error,
    ),
    OperationDescriptor(
        name="get_ps_order_status",
        description="Retrieves order status using PromoStandards Order Status Service V2.",
        endpoint="ps_order_status_v2",
        procedure="getOrderStatus",
        argument_schema=(
            _query_type(STATUS_V2_QUERY_TYPES),
            FieldSpec("referenceNumber",
                      requirement=RequiredWhen("queryType", {"poSearch", "soSearch"}),
                      description="Purchase order or sales order number"),
            FieldSpec("statusTimeStamp", requirement=RequiredWhen("queryType", {"lastUpdate"}),
                      description="ISO 8601 timestamp"),
            FieldSpec("returnIssueDetailType", choices=ISSUE_DETAIL_TYPES, default="noIssues",
                      description="Type of issue details to return"),
            FieldSpec("returnProductDetail", kind="boolean", default=True,
                      description="Whether to return product details"),
        ),
        shape=promostandards(
            "2.0.0",
            fields=(
                "queryType",
                "referenceNumber",
                "statusTimeStamp",
                "returnIssueDetailType",
                "returnProductDetail",
            ),
            # Only fills absent fields, an explicit false is kept
            defaults={"returnIssueDetailType": "noIssues", "returnProductDetail": True},
        ),
        extract_domain_error=promostandards_error,
    ),
    OperationDescriptor(
        name="get_ps_service_methods",
        description="Retrieves service methods using PromoStandards Order Status Service V2.",
        endpoint="ps_order_status_v2",
        procedure="getServiceMethods",
        argument_schema=(),
        shape=promostandards("2.0.0"),
        extract_domain_error=promostandards_error,
    ),
]


def register_tools(mcp):
    """Register order status and shipment tools with the FastMCP server"""

    @mcp.tool(**tool_options("get_sanmar_packing_slip"))
    async def get_sanmar_packing_slip(packingSlipId: str, ctx: Context = None) -> Any:
        return await dispatch("get_sanmar_packing_slip", {"packingSlipId": packingSlipId}, ctx)

    @mcp.tool(**tool_options("get_ps_order_shipment_notification"))
    async def get_ps_order_shipment_notification(
        queryType: str,
        referenceNumber: Optional[str] = None,
        shipmentDateTimeStamp: Optional[str] = None,
        ctx: Context = None,
    ) -> Any:
        """
        Get shipment notifications.

        Args:
            queryType: 1 = by PO number, 2 = by sales order number, 3 = shipped since a timestamp
            referenceNumber: PO or sales order number (queryType 1 or 2)
            shipmentDateTimeStamp: ISO 8601 timestamp (queryType 3)
        """
        return await dispatch(
            "get_ps_order_shipment_notification",
            {
                "queryType": queryType,
                "referenceNumber": referenceNumber,
                "shipmentDateTimeStamp": shipmentDateTimeStamp,
            },
            ctx,
        )

    @mcp.tool(**tool_options("get_ps_order_status_types"))
    async def get_ps_order_status_types(ctx: Context = None) -> Any:
        return await dispatch("get_ps_order_status_types", {}, ctx)

    @mcp.tool(**tool_options("get_ps_order_status_details"))
    async def get_ps_order_status_details(
        queryType: str,
        referenceNumber: Optional[str] = None,
        statusTimeStamp: Optional[str] = None,
        ctx: Context = None,
    ) -> Any:
        return await dispatch(
            "get_ps_order_status_details",
            {
                "queryType": queryType,
                "referenceNumber": referenceNumber,
                "statusTimeStamp": statusTimeStamp,
            },
            ctx,
        )

    @mcp.tool(**tool_options("get_ps_order_status"))
    async def get_ps_order_status(
        queryType: str,
        referenceNumber: Optional[str] = None,
        statusTimeStamp: Optional[str] = None,
        returnIssueDetailType: Optional[str] = None,
        returnProductDetail: Optional[bool] = None,
        ctx: Context = None,
    ) -> Any:
        """
        Get order status through Order Status V2.

        Args:
            queryType: poSearch, soSearch, lastUpdate, allOpen or allOpenIssues
            referenceNumber: PO or sales order number (poSearch / soSearch)
            statusTimeStamp: ISO 8601 timestamp (lastUpdate)
            returnIssueDetailType: noIssues (default), openIssues or allIssues
            returnProductDetail: Include product detail, defaults to true

        Returns:
            The OrderStatusArray response
        """
        return await dispatch(
            "get_ps_order_status",
            {
                "queryType": queryType,
                "referenceNumber": referenceNumber,
                "statusTimeStamp": statusTimeStamp,
                "returnIssueDetailType": returnIssueDetailType,
                "returnProductDetail": returnProductDetail,
            },
            ctx,
        )

    @mcp.tool(**tool_options("get_ps_service_methods"))
    async def get_ps_service_methods(ctx: Context = None) -> Any:
        return await dispatch("get_ps_service_methods", {}, ctx)
